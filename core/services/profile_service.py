# =============================================================================
# core/services/profile_service.py - Public Profile Page
# =============================================================================
# Loads the data behind /{username}.
#
# States: loading -> found | not_found | unavailable
# - not_found: the API answered 404
# - unavailable: any other failure (timeout, 5xx, network). Rendered as an
#   explicit error with a retry link rather than an endless loading state.
# =============================================================================

import logging
from dataclasses import dataclass, field
from enum import Enum

from app.config import settings
from core.models.theme import ResolvedTheme, resolve_theme
from core.models.user import Link, User
from lib.api_client import ApiRequestError, BranchApiClient

logger = logging.getLogger(__name__)


class ProfilePageStatus(str, Enum):
    LOADING = "loading"
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass
class PublicProfileView:
    """Everything the public page template needs."""
    username: str
    status: ProfilePageStatus = ProfilePageStatus.LOADING
    profile: User | None = None
    theme: ResolvedTheme = field(default_factory=ResolvedTheme)
    error: str | None = None

    @property
    def display_name(self) -> str:
        return self.profile.display_name if self.profile else self.username

    @property
    def avatar_url(self) -> str:
        if self.profile and self.profile.avatar:
            return self.profile.avatar
        return settings.DEFAULT_AVATAR_URL

    @property
    def bio(self) -> str | None:
        return self.profile.bio if self.profile else None

    @property
    def links(self) -> list[Link]:
        return self.profile.links if self.profile else []

    @property
    def http_status(self) -> int:
        return {
            ProfilePageStatus.NOT_FOUND: 404,
            ProfilePageStatus.UNAVAILABLE: 503,
        }.get(self.status, 200)


def load_public_profile(api: BranchApiClient, username: str) -> PublicProfileView:
    """
    Fetch a public profile and resolve its theme.

    Never raises for API errors; the outcome is carried in view.status.
    """
    view = PublicProfileView(username=username)

    try:
        profile = api.get_user_profile(username)
    except ApiRequestError as e:
        if e.is_not_found:
            view.status = ProfilePageStatus.NOT_FOUND
        else:
            logger.error(f"Error fetching user profile {username}: {e.message}")
            view.status = ProfilePageStatus.UNAVAILABLE
            view.error = e.message
        return view

    view.profile = profile
    view.theme = resolve_theme(profile.theme)
    view.status = ProfilePageStatus.FOUND
    return view
