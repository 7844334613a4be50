# =============================================================================
# app/routers/profile.py - Public Profile Page
# =============================================================================
# GET /{username} renders a user's public link page.
#
# This is a catch-all path, so the router must be mounted after every other
# router in main.py.
# =============================================================================

from fastapi import APIRouter, Request

from app.dependencies import ApiClientDep
from app.rendering import render
from core.services.profile_service import load_public_profile

router = APIRouter(tags=["Profile"])


@router.get("/{username}")
def public_profile(request: Request, username: str, api: ApiClientDep):
    """
    Public page for one user.

    Status codes:
        200: Profile found (themed page)
        404: "User not found"
        503: Backend unavailable, with a retry link
    """
    view = load_public_profile(api, username)
    return render(request, "profile.html", {"view": view}, status_code=view.http_status)
