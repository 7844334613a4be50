# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Cookie-backed bearer token sessions and the sign-in / sign-up pages.
#
# Usage:
#   from app.auth import CookieTokenStore
#
#   session = Session(api, CookieTokenStore(request.cookies))
# =============================================================================

from app.auth.cookies import CookieTokenStore
from app.auth.forms import validate_signin, validate_signup

__all__ = [
    "CookieTokenStore",
    "validate_signin",
    "validate_signup",
]
