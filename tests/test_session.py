# =============================================================================
# tests/test_session.py - Session and Token Store Tests
# =============================================================================
# The session must keep the durable token and the API client header in step:
# after every write both hold the same token or neither holds one.
#
# Run with: pytest tests/test_session.py -v
# =============================================================================

import time

import pytest
from jose import jwt
from starlette.responses import Response

from app.auth.cookies import CookieTokenStore
from core.session import MemoryTokenStore, Session, SessionClosedError, token_expired


def make_jwt(exp: float) -> str:
    return jwt.encode({"sub": "alice", "exp": int(exp)}, "test-secret", algorithm="HS256")


# =============================================================================
# Session Tests
# =============================================================================

class TestSetAuthToken:
    """Tests for Session.set_auth_token()."""

    def test_token_goes_to_header_and_store(self, session):
        session.set_auth_token("abc")

        assert session.token == "abc"
        assert session.store.load() == "abc"
        assert session.api.auth_header == "Bearer abc"

    def test_none_clears_both(self, session):
        session.set_auth_token("abc")
        session.set_auth_token(None)

        assert session.token is None
        assert session.store.load() is None
        assert session.api.auth_header is None

    def test_last_write_wins(self, session):
        session.set_auth_token("first")
        session.set_auth_token("second")

        assert session.store.load() == "second"
        assert session.api.auth_header == "Bearer second"

    def test_closed_session_rejects_writes(self, session):
        session.close()

        assert session.api.is_closed
        with pytest.raises(SessionClosedError):
            session.set_auth_token("abc")


class TestRehydrate:
    """Tests for Session.rehydrate()."""

    def test_no_stored_token(self, api):
        session = Session(api, MemoryTokenStore())
        assert session.rehydrate() is None
        assert api.auth_header is None

    def test_stored_token_is_installed(self, api):
        session = Session(api, MemoryTokenStore("opaque-token"))

        assert session.rehydrate() == "opaque-token"
        assert api.auth_header == "Bearer opaque-token"

    def test_expired_jwt_is_dropped(self, api):
        store = MemoryTokenStore(make_jwt(time.time() - 60))
        session = Session(api, store)

        assert session.rehydrate() is None
        assert store.load() is None
        assert api.auth_header is None

    def test_valid_jwt_is_kept(self, api):
        token = make_jwt(time.time() + 3600)
        session = Session(api, MemoryTokenStore(token))

        assert session.rehydrate() == token


class TestTokenExpired:
    """Tests for the local exp check."""

    def test_opaque_token_never_expires(self):
        assert token_expired("not-a-jwt") is False

    def test_expired(self):
        assert token_expired(make_jwt(1000), now=2000) is True

    def test_not_expired(self):
        assert token_expired(make_jwt(3000), now=2000) is False

    def test_jwt_without_exp(self):
        token = jwt.encode({"sub": "alice"}, "test-secret", algorithm="HS256")
        assert token_expired(token) is False


# =============================================================================
# Cookie Store Tests
# =============================================================================

class TestCookieTokenStore:
    """Tests for the authToken cookie store."""

    def test_reads_incoming_cookie(self):
        store = CookieTokenStore({"authToken": "abc"})
        assert store.load() == "abc"

    def test_save_sets_cookie(self):
        store = CookieTokenStore({})
        store.save("abc")
        response = Response()

        store.apply_to(response)

        header = response.headers["set-cookie"]
        assert header.startswith("authToken=abc")
        assert "HttpOnly" in header
        assert "Path=/" in header
        assert "SameSite=lax" in header

    def test_resaving_same_token_writes_nothing(self):
        store = CookieTokenStore({"authToken": "abc"})
        store.save("abc")
        response = Response()

        store.apply_to(response)

        assert "set-cookie" not in response.headers

    def test_clear_deletes_cookie(self):
        store = CookieTokenStore({"authToken": "abc"})
        store.clear()
        response = Response()

        store.apply_to(response)

        assert store.load() is None
        header = response.headers["set-cookie"]
        assert header.startswith('authToken=""') or header.startswith("authToken=;")
        assert "Max-Age=0" in header

    def test_clear_without_cookie_writes_nothing(self):
        store = CookieTokenStore({})
        store.clear()
        assert not store.has_pending_write

    def test_session_over_cookie_store(self, api):
        """Logout through the session ends in a cookie deletion."""
        session = Session(api, CookieTokenStore({"authToken": "abc"}))
        session.rehydrate()
        session.set_auth_token(None)

        response = session.apply_to(Response())

        assert api.auth_header is None
        assert "Max-Age=0" in response.headers["set-cookie"]
