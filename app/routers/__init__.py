# =============================================================================
# app/routers/ - Page Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - dashboard.py: Signed-in editing pages (links, profile, theme)
# - profile.py: Public /{username} page (catch-all, mounted last)
#
# Sign-in and sign-up pages live in app/auth/routes.py.
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import dashboard
from . import profile

__all__ = [
    "health",
    "dashboard",
    "profile",
]
