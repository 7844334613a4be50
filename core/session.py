# =============================================================================
# core/session.py - Bearer Token Session
# =============================================================================
# The session is the only owner of the bearer token. It keeps two copies in
# step:
# - the durable copy in a TokenStore (the browser cookie in the web app)
# - the Authorization header of the API client
#
# Every write goes through Session.set_auth_token(), so after any mutation
# both copies are either the same token or both absent.
#
# Lifecycle: created -> rehydrate() -> (authenticated | anonymous) -> close()
# =============================================================================

from __future__ import annotations

import logging
import time
from typing import Any

from jose import JWTError, jwt

from lib.api_client import BranchApiClient
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class SessionClosedError(ApplicationError):
    """Raised when a disposed session is used again."""

    def __init__(self):
        super().__init__(
            "Session is closed",
            code="SESSION_CLOSED",
            suggestion="Create a new Session for each request",
        )


# =============================================================================
# Token Stores (durable client storage)
# =============================================================================

class TokenStore:
    """
    Durable storage for the bearer token.

    Subclasses persist the token somewhere that outlives a single request.
    apply_to() lets stores that can only write through the HTTP response
    (cookies) flush their pending change.
    """

    def load(self) -> str | None:
        raise NotImplementedError

    def save(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def apply_to(self, response: Any) -> None:
        """Flush pending writes to an outgoing response (no-op by default)."""
        return None


class MemoryTokenStore(TokenStore):
    """Process-local store, used for scripted access and as a default."""

    def __init__(self, token: str | None = None):
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


# =============================================================================
# Token helpers
# =============================================================================

def token_expired(token: str, now: float | None = None) -> bool:
    """
    Check a token's "exp" claim without verifying its signature.

    Opaque (non-JWT) tokens and JWTs without "exp" are never considered
    expired here; the backend remains the authority and will answer 401.
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return False

    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return False
    return exp <= (now if now is not None else time.time())


# =============================================================================
# Session
# =============================================================================

class Session:
    """
    Explicit bearer-token session bound to one API client and one store.

    Example:
        session = Session(BranchApiClient(url), CookieTokenStore(cookies))
        session.rehydrate()              # installs the stored token, if any
        session.set_auth_token(token)    # header + store updated together
        session.set_auth_token(None)     # both removed
        session.close()
    """

    def __init__(self, api: BranchApiClient, store: TokenStore | None = None):
        self.api = api
        self.store = store if store is not None else MemoryTokenStore()
        self._token: str | None = None
        self._closed = False

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def closed(self) -> bool:
        return self._closed

    def set_auth_token(self, token: str | None) -> None:
        """
        Install or remove the bearer token.

        A token is written to the API client's default headers and to the
        durable store; None removes it from both. Always a full overwrite.
        """
        if self._closed:
            raise SessionClosedError()

        if token:
            self.api.set_auth_token(token)
            self.store.save(token)
        else:
            self.api.set_auth_token(None)
            self.store.clear()
        self._token = token or None

    def rehydrate(self) -> str | None:
        """
        Read the durable token once and install it.

        A token whose JWT "exp" is already in the past is dropped here
        instead of being sent to the backend.

        Returns:
            The installed token, or None
        """
        token = self.store.load()
        if not token:
            return None

        if token_expired(token):
            logger.info("Stored token has expired, clearing it")
            self.set_auth_token(None)
            return None

        self.set_auth_token(token)
        return token

    def apply_to(self, response: Any) -> Any:
        """Flush pending durable-storage writes onto a response."""
        self.store.apply_to(response)
        return response

    def close(self) -> None:
        """Dispose the session and its HTTP client."""
        if self._closed:
            return
        self._closed = True
        self.api.close()
