# =============================================================================
# app/auth/cookies.py - Cookie Token Store
# =============================================================================
# The browser cookie is the durable copy of the bearer token.
#
# The incoming cookie is read once per request. Writes can only reach the
# browser through the response, so they are recorded and flushed by
# apply_to() when the page response is built.
# =============================================================================

from starlette.responses import Response

from app.config import settings
from core.session import TokenStore

# Marks a pending "delete cookie" write
_CLEARED = object()


class CookieTokenStore(TokenStore):
    """
    TokenStore backed by the auth cookie.

    Example:
        store = CookieTokenStore(request.cookies)
        store.save("abc")
        store.apply_to(response)   # Set-Cookie: authToken=abc
    """

    def __init__(self, cookies: dict[str, str], cookie_name: str | None = None):
        self.cookie_name = cookie_name or settings.AUTH_COOKIE_NAME
        self._incoming = cookies.get(self.cookie_name) or None
        self._pending = None

    @property
    def has_pending_write(self) -> bool:
        return self._pending is not None

    def load(self) -> str | None:
        if self._pending is _CLEARED:
            return None
        if self._pending is not None:
            return self._pending
        return self._incoming

    def save(self, token: str) -> None:
        # Re-installing the token the browser already sent needs no write
        if self._pending is None and token == self._incoming:
            return
        self._pending = token

    def clear(self) -> None:
        if self._pending is None and self._incoming is None:
            return
        self._pending = _CLEARED

    def apply_to(self, response: Response) -> None:
        if self._pending is None:
            return
        if self._pending is _CLEARED:
            response.delete_cookie(self.cookie_name, path="/")
        else:
            response.set_cookie(
                key=self.cookie_name,
                value=self._pending,
                max_age=settings.auth_cookie_max_age,
                httponly=True,
                secure=settings.COOKIE_SECURE,
                samesite="lax",
                path="/",
            )
