# =============================================================================
# app/routers/dashboard.py - Dashboard Pages
# =============================================================================
# The signed-in user's editing surface, split into three tabs:
# - links: add, edit and remove links
# - profile: name, bio and avatar
# - settings: page theme and the shareable page URL
#
# Successful POSTs redirect back to the tab with a notice code (PRG).
# Failed POSTs re-render the tab with the error inline.
# =============================================================================

import logging

from fastapi import APIRouter, File, Form, Request, UploadFile

from app.dependencies import AuthenticatedDep, StorageDep
from app.exceptions import BranchException, ThemeValidationError, api_error_status
from app.rendering import redirect, render
from core.services.auth_service import SIGNIN_PATH, AuthContext
from core.services.dashboard_service import DashboardService, ThemeDraft
from core.services.storage_service import ImageUpload
from lib.api_client import ApiRequestError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

TABS = ("links", "profile", "settings")

NOTICES = {
    "link_added": "Link added",
    "link_updated": "Link updated",
    "link_removed": "Link removed",
    "profile_saved": "Profile updated successfully!",
    "theme_saved": "Theme settings saved successfully!",
}

# Shown when the backend rejects a dashboard action
API_ERRORS = {
    "add_link": "Error adding link. Please try again.",
    "update_link": "Error updating link. Please try again.",
    "remove_link": "Error removing link. Please try again.",
    "profile": "Error updating profile. Please try again.",
    "theme": "Error saving theme settings. Please try again.",
}


# =============================================================================
# Helpers
# =============================================================================

async def read_upload(file: UploadFile | None) -> ImageUpload | None:
    """
    Turn a multipart file field into an ImageUpload.

    An empty file input (nothing chosen) gives None.
    """
    if file is None or not file.filename:
        return None
    content = await file.read()
    if not content:
        return None
    return ImageUpload(filename=file.filename, content=content, content_type=file.content_type)


def share_url(request: Request, username: str) -> str:
    """Public page URL: {origin}/{username}."""
    return f"{str(request.base_url).rstrip('/')}/{username}"


def dashboard_page(
    request: Request,
    auth: AuthContext,
    dashboard: DashboardService,
    tab: str = "links",
    notice: str | None = None,
    error: str | None = None,
    draft: ThemeDraft | None = None,
    status_code: int = 200,
):
    user = dashboard.user
    draft = draft or ThemeDraft.from_user(user)
    return render(
        request,
        "dashboard.html",
        {
            "user": user,
            "links": dashboard.links,
            "tab": tab if tab in TABS else "links",
            "notice": NOTICES.get(notice) if notice else None,
            "error": error,
            "draft": draft,
            "preview": draft.preview(),
            "share_url": share_url(request, user.username),
        },
        session=auth.session,
        status_code=status_code,
    )


def action_failed(
    request: Request,
    auth: AuthContext,
    dashboard: DashboardService,
    tab: str,
    action: str,
    exc: Exception,
    draft: ThemeDraft | None = None,
):
    """
    Answer a failed dashboard action.

    A 401 means the token was rejected mid-action: the context is signed
    out (cookie cleared) and the visitor is sent to sign in instead of
    seeing the error.
    """
    if isinstance(exc, ApiRequestError):
        auth.drop_rejected_token(exc)
    if not auth.is_authenticated:
        return redirect(SIGNIN_PATH, auth.session)

    if isinstance(exc, ApiRequestError):
        message = API_ERRORS[action]
        status_code = api_error_status(exc.status_code)
    else:
        message = exc.message
        status_code = exc.status_code

    return dashboard_page(
        request, auth, dashboard,
        tab=tab,
        error=message,
        draft=draft,
        status_code=status_code,
    )


# =============================================================================
# Pages
# =============================================================================

@router.get("")
def dashboard(
    request: Request,
    auth: AuthenticatedDep,
    storage: StorageDep,
    tab: str = "links",
    notice: str | None = None,
):
    """Dashboard for the signed-in user."""
    return dashboard_page(request, auth, DashboardService(auth, storage), tab=tab, notice=notice)


# =============================================================================
# Links
# =============================================================================

@router.post("/links")
def add_link(
    request: Request,
    auth: AuthenticatedDep,
    storage: StorageDep,
    title: str = Form(""),
    url: str = Form(""),
):
    """Add a link; a URL without a scheme is stored as https://."""
    service = DashboardService(auth, storage)
    try:
        service.add_link(title, url)
    except (BranchException, ApiRequestError) as e:
        logger.error(f"Error adding link: {e}")
        return action_failed(request, auth, service, "links", "add_link", e)
    return redirect("/dashboard?tab=links&notice=link_added", auth.session)


@router.post("/links/{link_id}")
def update_link(
    request: Request,
    link_id: str,
    auth: AuthenticatedDep,
    storage: StorageDep,
    title: str = Form(""),
    url: str = Form(""),
):
    service = DashboardService(auth, storage)
    try:
        service.update_link(link_id, title, url)
    except (BranchException, ApiRequestError) as e:
        logger.error(f"Error updating link {link_id}: {e}")
        return action_failed(request, auth, service, "links", "update_link", e)
    return redirect("/dashboard?tab=links&notice=link_updated", auth.session)


@router.post("/links/{link_id}/delete")
def remove_link(request: Request, link_id: str, auth: AuthenticatedDep, storage: StorageDep):
    service = DashboardService(auth, storage)
    try:
        service.remove_link(link_id)
    except (BranchException, ApiRequestError) as e:
        logger.error(f"Error removing link {link_id}: {e}")
        return action_failed(request, auth, service, "links", "remove_link", e)
    return redirect("/dashboard?tab=links&notice=link_removed", auth.session)


# =============================================================================
# Profile
# =============================================================================

@router.post("/profile")
async def save_profile(
    request: Request,
    auth: AuthenticatedDep,
    storage: StorageDep,
    name: str = Form(""),
    bio: str = Form(""),
    avatar: UploadFile | None = File(None),
):
    """
    Save name and bio, and the new avatar when one was chosen.

    Image checks (type, 2MB) run before anything is uploaded.
    """
    service = DashboardService(auth, storage)
    upload = await read_upload(avatar)
    try:
        service.save_profile(name.strip(), bio.strip(), upload)
    except (BranchException, ApiRequestError) as e:
        logger.error(f"Error updating profile: {e}")
        return action_failed(request, auth, service, "profile", "profile", e)
    return redirect("/dashboard?tab=profile&notice=profile_saved", auth.session)


# =============================================================================
# Theme
# =============================================================================

@router.post("/theme")
async def save_theme(
    request: Request,
    auth: AuthenticatedDep,
    storage: StorageDep,
    page_background: str = Form("bg-black"),
    button_style: str = Form("solid"),
    font_family: str = Form("font-inter"),
    custom_background: str = Form(""),
    background: UploadFile | None = File(None),
):
    """
    Save the theme selection.

    custom_background carries the wallpaper already stored for the user;
    background is a newly chosen file (max 5MB).
    """
    service = DashboardService(auth, storage)
    draft = ThemeDraft(
        page_background=page_background,
        button_style=button_style,
        font_family=font_family,
        custom_background=custom_background or None,
        background_upload=await read_upload(background),
    )
    try:
        service.save_theme_settings(draft)
    except ThemeValidationError as e:
        # The draft has been reverted to the default swatch
        return action_failed(request, auth, service, "settings", "theme", e, draft=draft)
    except (BranchException, ApiRequestError) as e:
        logger.error(f"Error saving theme settings: {e}")
        draft.background_upload = None
        return action_failed(request, auth, service, "settings", "theme", e, draft=draft)
    return redirect("/dashboard?tab=settings&notice=theme_saved", auth.session)
