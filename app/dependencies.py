# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for per-request resources.
# Each request gets its own API client, Session and AuthContext; nothing
# about the signed-in user lives at module level.
# =============================================================================

from typing import Annotated, Iterator

from fastapi import Depends, Request

from app.auth.cookies import CookieTokenStore
from app.config import settings
from app.exceptions import AuthenticationRequiredError
from core.services.auth_service import AuthContext
from core.services.storage_service import StorageService
from core.session import Session
from lib.api_client import BranchApiClient


def get_api_client() -> Iterator[BranchApiClient]:
    """
    Create the REST client for one request.

    Closed when the request is done.
    """
    client = BranchApiClient(
        settings.api_base_url,
        timeout=settings.API_TIMEOUT_SECONDS,
        signup_timeout=settings.SIGNUP_TIMEOUT_SECONDS,
        api_prefix=settings.API_PREFIX,
    )
    try:
        yield client
    finally:
        client.close()


ApiClientDep = Annotated[BranchApiClient, Depends(get_api_client)]


def get_session(request: Request, api: ApiClientDep) -> Session:
    """Bind the auth cookie and the API client into a Session."""
    return Session(api, CookieTokenStore(request.cookies))


SessionDep = Annotated[Session, Depends(get_session)]


def get_auth_context(session: SessionDep) -> AuthContext:
    """
    Get the initialized auth context.

    Rehydrates the cookie token and resolves the user before the route runs.
    """
    auth = AuthContext(session)
    auth.initialize()
    return auth


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


def require_user(auth: AuthDep, request: Request) -> AuthContext:
    """
    Get the auth context of a signed-in user.

    Raises:
        AuthenticationRequiredError: Anonymous visitor (redirects to /signin)
    """
    if not auth.is_authenticated:
        raise AuthenticationRequiredError(request.url.path)
    return auth


AuthenticatedDep = Annotated[AuthContext, Depends(require_user)]


def get_storage_service() -> type[StorageService]:
    """
    Get the storage service.

    Returns the class (all methods are static), so tests can override it.
    """
    return StorageService


StorageDep = Annotated[type[StorageService], Depends(get_storage_service)]
