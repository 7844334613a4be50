# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: User, Link and request/response bodies of the REST API
# - theme.py: Theme settings and the resolve_theme() defaults
#
# These models define the "contract" between this frontend and the API.
# =============================================================================

# -----------------------------------------------------------------------------
# Theme Models
# -----------------------------------------------------------------------------
from .theme import (
    BUTTON_CLASSES,
    CUSTOM_BACKGROUND,
    DEFAULT_PAGE_BACKGROUND,
    FONT_LABELS,
    PAGE_BACKGROUNDS,
    ButtonStyle,
    FontFamily,
    ResolvedTheme,
    Theme,
    ThemeUpdate,
    resolve_theme,
)

# -----------------------------------------------------------------------------
# User Models
# -----------------------------------------------------------------------------
from .user import (
    Link,
    LinkCreate,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    User,
)

__all__ = [
    # Theme
    "BUTTON_CLASSES",
    "CUSTOM_BACKGROUND",
    "DEFAULT_PAGE_BACKGROUND",
    "FONT_LABELS",
    "PAGE_BACKGROUNDS",
    "ButtonStyle",
    "FontFamily",
    "ResolvedTheme",
    "Theme",
    "ThemeUpdate",
    "resolve_theme",
    # User
    "Link",
    "LinkCreate",
    "ProfileUpdate",
    "SignupRequest",
    "TokenResponse",
    "User",
]
