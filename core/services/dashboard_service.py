# =============================================================================
# core/services/dashboard_service.py - Dashboard Business Logic
# =============================================================================
# Everything the signed-in user can change from the dashboard:
# - links: add / edit / remove, each followed by a re-fetch of /me/
# - profile: name, bio and avatar
# - theme: background swatch or wallpaper, button style, font
#
# The backend is authoritative. After a mutation nothing is merged locally;
# the user (and its links) is fetched again.
# =============================================================================

import logging
from dataclasses import dataclass

from app.exceptions import AuthenticationRequiredError, FormValidationError, ThemeValidationError
from core.models.theme import (
    CUSTOM_BACKGROUND,
    DEFAULT_PAGE_BACKGROUND,
    ButtonStyle,
    FontFamily,
    ResolvedTheme,
    ThemeUpdate,
    resolve_theme,
)
from core.models.user import Link, LinkCreate, ProfileUpdate, User
from core.services.auth_service import AuthContext
from core.services.storage_service import ImageUpload, StorageService
from lib.api_client import ApiRequestError
from lib.utils import ensure_url_scheme

logger = logging.getLogger(__name__)


@dataclass
class ThemeDraft:
    """
    Theme selection being edited on the settings tab.

    background_upload is a wallpaper picked in the form but not yet stored.
    """
    page_background: str = DEFAULT_PAGE_BACKGROUND
    button_style: str = ButtonStyle.SOLID.value
    font_family: str = FontFamily.INTER.value
    custom_background: str | None = None
    background_upload: ImageUpload | None = None

    @classmethod
    def from_user(cls, user: User | None) -> "ThemeDraft":
        theme = resolve_theme(user.theme if user else None)
        return cls(
            page_background=theme.page_background,
            button_style=theme.button_style.value,
            font_family=theme.font_family.value,
            custom_background=theme.custom_background,
        )

    def preview(self) -> ResolvedTheme:
        """Theme as it would render, for the settings preview."""
        return resolve_theme({
            "pageBackground": self.page_background,
            "buttonStyle": self.button_style,
            "fontFamily": self.font_family,
            "customBackground": self.custom_background,
        })


class DashboardService:
    """
    Dashboard operations for the signed-in user.

    Example:
        dashboard = DashboardService(auth)
        links = dashboard.add_link("Blog", "example.com")  # stored as https://example.com
    """

    def __init__(self, auth: AuthContext, storage: type[StorageService] = StorageService):
        self.auth = auth
        self.storage = storage
        self.links: list[Link] = list(auth.user.links) if auth.user else []

    @property
    def api(self):
        return self.auth.api

    @property
    def user(self) -> User:
        if self.auth.user is None:
            raise AuthenticationRequiredError()
        return self.auth.user

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    def fetch_links(self) -> list[Link]:
        """
        Re-fetch the link list from /me/.

        A failed re-fetch is logged and the previous list is kept.
        """
        try:
            user = self.auth.refresh_user()
            self.links = list(user.links)
        except ApiRequestError as e:
            logger.error(f"Error fetching links: {e.message}")
        return self.links

    @staticmethod
    def _link_payload(title: str, url: str) -> LinkCreate:
        title = (title or "").strip()
        url = (url or "").strip()
        if not title:
            raise FormValidationError("Link title is required", field="title")
        if not url:
            raise FormValidationError("Link URL is required", field="url")
        return LinkCreate(title=title, url=ensure_url_scheme(url))

    def add_link(self, title: str, url: str) -> list[Link]:
        """
        Create a link, then reload the list.

        URLs without a scheme get https:// in front.

        Raises:
            FormValidationError: Missing title or URL (nothing is sent)
            ApiRequestError: The backend rejected the link
        """
        payload = self._link_payload(title, url)
        self.api.create_link(payload)
        logger.info(f"Added link for {self.user.username}: {payload.url}")
        return self.fetch_links()

    def update_link(self, link_id: str, title: str, url: str) -> list[Link]:
        """Replace one link's title and URL, then reload the list."""
        if not link_id:
            raise FormValidationError("Invalid link ID", field="link_id")
        payload = self._link_payload(title, url)
        self.api.update_link(link_id, payload)
        return self.fetch_links()

    def remove_link(self, link_id: str) -> list[Link]:
        """Delete one link, then reload the list."""
        if not link_id:
            raise FormValidationError("Invalid link ID", field="link_id")
        self.api.delete_link(link_id)
        logger.info(f"Removed link {link_id} for {self.user.username}")
        return self.fetch_links()

    # -------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------

    def save_profile(
        self,
        name: str | None,
        bio: str | None,
        avatar_upload: ImageUpload | None = None,
    ) -> User:
        """
        Save name and bio, uploading a new avatar first when one is given.

        An avatar upload failure aborts the whole save, so the profile is
        never updated with a half-finished avatar.

        Raises:
            InvalidImageError / ImageTooLargeError / StorageUploadError
            ApiRequestError
        """
        user = self.user
        avatar_url = user.avatar

        if avatar_upload is not None:
            avatar_url = self.storage.upload_avatar(user.storage_key, avatar_upload)
            logger.info(f"New avatar URL: {avatar_url}")

        self.api.update_profile(ProfileUpdate(name=name or "", bio=bio or "", avatar=avatar_url))
        updated = self.auth.refresh_user()
        self.links = list(updated.links)
        return updated

    # -------------------------------------------------------------------------
    # Theme
    # -------------------------------------------------------------------------

    def save_theme_settings(self, draft: ThemeDraft) -> ThemeUpdate:
        """
        Save the theme selection.

        A custom background with neither a stored wallpaper nor a pending
        upload is rejected before any network call and the selection is
        reverted to the default swatch.

        Returns:
            The theme that was sent

        Raises:
            ThemeValidationError: Custom background without an image
            StorageUploadError: Wallpaper upload failed
            ApiRequestError: The backend rejected the update
        """
        if (
            draft.page_background == CUSTOM_BACKGROUND
            and not draft.custom_background
            and draft.background_upload is None
        ):
            draft.page_background = DEFAULT_PAGE_BACKGROUND
            raise ThemeValidationError()

        background_url = draft.custom_background
        if draft.background_upload is not None:
            background_url = self.storage.upload_wallpaper(self.user.storage_key, draft.background_upload)
            logger.info(f"New wallpaper URL: {background_url}")
            draft.custom_background = background_url
            draft.page_background = CUSTOM_BACKGROUND

        resolved = draft.preview()
        theme = ThemeUpdate(
            page_background=resolved.page_background,
            button_style=resolved.button_style,
            font_family=resolved.font_family,
            custom_background=background_url if resolved.is_custom else None,
        )

        self.api.update_profile(ProfileUpdate(theme=theme))

        if not resolved.is_custom:
            draft.background_upload = None
            draft.custom_background = None

        self.auth.refresh_user()
        return theme
