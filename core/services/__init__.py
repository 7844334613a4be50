# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .auth_service import AuthContext, AuthState
from .dashboard_service import DashboardService, ThemeDraft
from .profile_service import ProfilePageStatus, PublicProfileView, load_public_profile
from .storage_service import ImageKind, ImageUpload, StorageService

__all__ = [
    "AuthContext",
    "AuthState",
    "DashboardService",
    "ThemeDraft",
    "ProfilePageStatus",
    "PublicProfileView",
    "load_public_profile",
    "ImageKind",
    "ImageUpload",
    "StorageService",
]
