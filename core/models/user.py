# =============================================================================
# core/models/user.py - User and Link Schemas
# =============================================================================
# These models define the contract with the Branch REST API:
# - Link / LinkCreate: a single outbound link
# - User: identity + profile record returned by /me/ and /users/{username}
# - ProfileUpdate: body of PUT /me/
# - SignupRequest / TokenResponse: account creation and login
#
# Link ids arrive as either "_id" or "id" depending on the backend version.
# Both are accepted here and exposed as Link.id only.
# =============================================================================

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .theme import Theme, ThemeUpdate


def _stringify_id(value: Any) -> Any:
    # Mongo-style backends send ObjectIds, SQL ones send ints
    if value is None or isinstance(value, str):
        return value
    return str(value)


class LinkCreate(BaseModel):
    """
    Schema for creating or replacing a link.

    Example:
        {
            "title": "My blog",
            "url": "https://example.com"
        }
    """

    title: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=2048)
    icon: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Link(BaseModel):
    """
    A link as returned by the backend.

    Ordering is whatever the backend returns (insertion order).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    title: str
    url: str
    icon: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Any:
        return _stringify_id(value)


class User(BaseModel):
    """
    Identity + profile record.

    The frontend only ever holds a cached copy; it is re-fetched after
    every mutation instead of being patched locally.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    username: str
    email: str | None = None
    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    links: list[Link] = Field(default_factory=list)
    theme: Theme | None = None

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Any:
        return _stringify_id(value)

    @field_validator("links", mode="before")
    @classmethod
    def default_links(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def display_name(self) -> str:
        return self.name or self.username

    @property
    def storage_key(self) -> str:
        """Identifier used for per-user storage prefixes."""
        return self.id or self.username


class ProfileUpdate(BaseModel):
    """
    Body of PUT /me/.

    Only fields that were explicitly set are sent, so saving the theme
    doesn't touch the name/bio and vice versa.
    """

    name: str | None = None
    bio: str | None = None
    avatar: str | None = None
    theme: ThemeUpdate | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class SignupRequest(BaseModel):
    """Body of POST /users/."""

    username: str
    email: str
    password: str


class TokenResponse(BaseModel):
    """Response of POST /auth/token."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
