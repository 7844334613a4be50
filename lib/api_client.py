# =============================================================================
# lib/api_client.py - Branch REST API Client
# =============================================================================
# A single configured httpx client for the Branch REST API plus one thin
# method per endpoint:
# - auth token (form-encoded login) and account creation
# - current user / public profile
# - profile update
# - link create / update / delete
# - health
#
# Every method is a single request/response pass-through: no retry, no
# caching. Errors are logged here and re-raised as ApiRequestError with the
# HTTP status and the backend's "detail" so that pages can branch on them.
#
# Usage:
#   from lib.api_client import BranchApiClient
#   api = BranchApiClient("https://api.example.com")
#   api.set_auth_token(token)
#   me = api.get_current_user()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from core.models.user import (
    Link,
    LinkCreate,
    ProfileUpdate,
    SignupRequest,
    TokenResponse,
    User,
)
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
DEFAULT_TIMEOUT = 10.0
SIGNUP_TIMEOUT = 15.0

ModelT = TypeVar("ModelT", bound=BaseModel)


class ApiRequestError(ApplicationError):
    """
    A REST call failed.

    status_code is None for transport failures (no response at all:
    DNS, refused connection, timeout).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
        code: str = "API_REQUEST_FAILED",
        suggestion: str | None = None,
    ):
        super().__init__(
            message,
            code=code,
            suggestion=suggestion,
            details={"status_code": status_code, "detail": detail},
        )
        self.status_code = status_code
        self.detail = detail

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @classmethod
    def from_httpx(cls, action: str, exc: httpx.HTTPError) -> "ApiRequestError":
        """Translate an httpx error into an ApiRequestError."""
        if isinstance(exc, httpx.HTTPStatusError):
            response = exc.response
            detail: Any
            try:
                body = response.json()
                detail = body.get("detail") if isinstance(body, dict) else body
            except ValueError:
                detail = response.text or None
            return cls(
                f"{action} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                detail=detail,
                code="API_HTTP_ERROR",
            )
        if isinstance(exc, httpx.TimeoutException):
            return cls(
                f"{action} timed out",
                code="API_TIMEOUT",
                suggestion="The server took too long to respond, try again",
            )
        return cls(
            f"{action} failed: {exc}",
            code="API_NETWORK_ERROR",
            suggestion="Check your connection and that the API is reachable",
        )


class BranchApiClient:
    """
    Thin typed wrapper over the Branch REST API.

    Holds one httpx.Client with the base URL, default timeout and the
    bearer header. The header is only changed through set_auth_token();
    Session keeps it in sync with durable storage.

    Example:
        api = BranchApiClient("http://localhost:8000")
        token = api.login("alice", "secret").access_token
        api.set_auth_token(token)
        api.create_link(LinkCreate(title="Blog", url="https://example.com"))
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        signup_timeout: float = SIGNUP_TIMEOUT,
        api_prefix: str = API_PREFIX,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_prefix = api_prefix.rstrip("/")
        self.signup_timeout = signup_timeout
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    # -------------------------------------------------------------------------
    # Client plumbing
    # -------------------------------------------------------------------------

    @property
    def auth_header(self) -> str | None:
        """Current Authorization header value, if any."""
        return self._http.headers.get("Authorization")

    def set_auth_token(self, token: str | None) -> None:
        """Install (or remove) the bearer header for all future requests."""
        if token:
            self._http.headers["Authorization"] = f"Bearer {token}"
        else:
            self._http.headers.pop("Authorization", None)

    def close(self) -> None:
        self._http.close()

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    def _url(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    def _request(self, action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            error = ApiRequestError.from_httpx(action, e)
            logger.error(f"{action} failed: {error.message} (detail: {error.detail})")
            raise error from e

    @staticmethod
    def _body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _parse(action: str, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """
        Decode a JSON body into model.

        Raises:
            ApiRequestError: The body is not JSON or doesn't match the model
                (code API_BAD_RESPONSE, status_code None)
        """
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            error = ApiRequestError(
                f"{action} returned an unexpected response",
                code="API_BAD_RESPONSE",
                suggestion="Check that API_URL points at the Branch API",
            )
            logger.error(f"{action} failed: {error.message} ({e})")
            raise error from e

    @staticmethod
    def _echoed_link(action: str, response: httpx.Response) -> Link | None:
        body = BranchApiClient._body(response)
        if not isinstance(body, dict):
            return None
        try:
            return Link.model_validate(body)
        except ValidationError as e:
            # The write went through; the echo is informational only
            logger.warning(f"{action}: ignoring unexpected response body ({e})")
            return None

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def login(self, username: str, password: str) -> TokenResponse:
        """
        Exchange credentials for a bearer token.

        The token endpoint is an OAuth2 password flow, so the body is
        form-encoded rather than JSON.

        Raises:
            ApiRequestError: 401 for bad credentials, others as returned
        """
        response = self._request(
            "Login",
            "POST",
            self._url("/auth/token"),
            data={"username": username, "password": password},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        return self._parse("Login", response, TokenResponse)

    def signup(self, username: str, email: str, password: str) -> Any:
        """
        Create an account.

        Uses the longer signup timeout. Returns the created user body.
        """
        payload = SignupRequest(username=username, email=email, password=password)
        logger.info(f"Sending signup request for {username}")
        response = self._request(
            "Signup",
            "POST",
            self._url("/users/"),
            json=payload.model_dump(),
            timeout=self.signup_timeout,
        )
        logger.info(f"Signup response received: {response.status_code}")
        return self._body(response)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_current_user(self) -> User:
        """Fetch the signed-in user (requires a bearer token)."""
        response = self._request("Fetching current user", "GET", self._url("/me/"))
        return self._parse("Fetching current user", response, User)

    def get_user_profile(self, username: str) -> User:
        """Fetch a public profile. 404 when the username doesn't exist."""
        response = self._request(
            "Fetching user profile",
            "GET",
            self._url(f"/users/{quote(username, safe='')}"),
        )
        return self._parse("Fetching user profile", response, User)

    def update_profile(self, update: ProfileUpdate) -> Any:
        """Send a partial profile update; returns the response body."""
        response = self._request(
            "Updating profile",
            "PUT",
            self._url("/me/"),
            json=update.to_payload(),
        )
        return self._body(response)

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    def create_link(self, link: LinkCreate) -> Link | None:
        """
        Create a link.

        The caller re-fetches the link list afterwards; the returned Link
        (when the backend echoes one) is informational only.
        """
        response = self._request(
            "Creating link",
            "POST",
            self._url("/me/links/"),
            json=link.to_payload(),
        )
        return self._echoed_link("Creating link", response)

    def update_link(self, link_id: str, link: LinkCreate) -> Link | None:
        """Replace a link's title/url/icon."""
        response = self._request(
            "Updating link",
            "PUT",
            self._url(f"/me/links/{quote(link_id, safe='')}"),
            json=link.to_payload(),
        )
        return self._echoed_link("Updating link", response)

    def delete_link(self, link_id: str) -> Any:
        """Delete a link by id."""
        response = self._request(
            "Deleting link",
            "DELETE",
            self._url(f"/me/links/{quote(link_id, safe='')}"),
        )
        return self._body(response)

    # -------------------------------------------------------------------------
    # Utility
    # -------------------------------------------------------------------------

    def check_health(self) -> Any:
        """GET /health (served outside the versioned prefix)."""
        response = self._request("Health check", "GET", "/health")
        return self._body(response)
