# =============================================================================
# tests/test_auth_service.py - Auth Context Tests
# =============================================================================
# Tests for the auth state machine and login / signup / logout.
#
# Run with: pytest tests/test_auth_service.py -v
# =============================================================================

import pytest

from core.services.auth_service import (
    DASHBOARD_PATH,
    SIGNIN_PATH,
    SIGNIN_REGISTERED_PATH,
    AuthContext,
    AuthState,
)
from core.session import MemoryTokenStore, Session
from lib.api_client import ApiRequestError


class TestInitialize:
    """Tests for AuthContext.initialize()."""

    def test_starts_uninitialized_and_loading(self, session):
        auth = AuthContext(session)

        assert auth.state == AuthState.UNINITIALIZED
        assert auth.is_loading
        assert not auth.is_authenticated

    def test_no_token_is_anonymous(self, session, backend):
        auth = AuthContext(session)

        assert auth.initialize() == AuthState.ANONYMOUS
        assert not auth.is_loading
        # No token, no /me/ call
        assert backend.requests == []

    def test_stored_token_is_resolved(self, api, backend):
        token = backend.issue_token("alice")
        auth = AuthContext(Session(api, MemoryTokenStore(token)))

        assert auth.initialize() == AuthState.AUTHENTICATED
        assert auth.user.username == "alice"
        assert backend.requests[-1].headers["Authorization"] == f"Bearer {token}"

    def test_rejected_token_is_cleared(self, api):
        store = MemoryTokenStore("revoked-token")
        auth = AuthContext(Session(api, store))

        assert auth.initialize() == AuthState.ANONYMOUS
        assert store.load() is None
        assert api.auth_header is None

    def test_backend_outage_is_anonymous(self, api, backend):
        backend.fail("GET", "/me/", 503)
        store = MemoryTokenStore(backend.issue_token("alice"))
        auth = AuthContext(Session(api, store))

        assert auth.initialize() == AuthState.ANONYMOUS
        assert store.load() is None

    def test_initialize_is_idempotent(self, api, backend):
        auth = AuthContext(Session(api, MemoryTokenStore(backend.issue_token("alice"))))
        auth.initialize()
        calls = len(backend.requests)

        auth.initialize()

        assert len(backend.requests) == calls

    def test_unreadable_user_is_anonymous(self, api, backend):
        backend.respond("GET", "/me/", content=b"<html>gateway</html>")
        store = MemoryTokenStore(backend.issue_token("alice"))
        auth = AuthContext(Session(api, store))

        assert auth.initialize() == AuthState.ANONYMOUS
        assert store.load() is None
        assert api.auth_header is None


class TestLogin:
    """Tests for AuthContext.login()."""

    def test_login_sets_token_everywhere(self, session):
        auth = AuthContext(session)
        auth.initialize()

        next_path = auth.login("alice", "secret")

        assert next_path == DASHBOARD_PATH
        assert auth.is_authenticated
        assert auth.state == AuthState.AUTHENTICATED
        assert session.store.load() == session.token
        assert session.api.auth_header == f"Bearer {session.token}"
        assert not auth.is_loading

    def test_bad_credentials_leave_no_token(self, session):
        auth = AuthContext(session)
        auth.initialize()

        with pytest.raises(ApiRequestError):
            auth.login("alice", "wrong")

        assert not auth.is_authenticated
        assert session.store.load() is None
        assert not auth.is_loading

    def test_unresolvable_token_is_dropped(self, session, backend):
        backend.fail("GET", "/me/", 500)
        auth = AuthContext(session)

        with pytest.raises(ApiRequestError):
            auth.login("alice", "secret")

        assert session.token is None
        assert session.api.auth_header is None

    def test_failure_before_initialize_settles(self, session):
        auth = AuthContext(session)

        with pytest.raises(ApiRequestError):
            auth.login("alice", "wrong")

        assert auth.state == AuthState.ANONYMOUS
        assert not auth.is_loading

    def test_token_response_without_token(self, session, backend):
        backend.respond("POST", "/auth/token", json={"token_type": "bearer"})
        auth = AuthContext(session)
        auth.initialize()

        with pytest.raises(ApiRequestError) as exc_info:
            auth.login("alice", "secret")

        assert exc_info.value.code == "API_BAD_RESPONSE"
        assert session.token is None


class TestSignup:
    """Tests for AuthContext.signup()."""

    def test_signup_logs_straight_in(self, session, backend):
        auth = AuthContext(session)

        assert auth.signup("bob", "bob@example.com", "hunter2") == DASHBOARD_PATH
        assert auth.user.username == "bob"
        assert "bob" in backend.users

    def test_signup_uses_longer_timeout(self, session, backend):
        AuthContext(session).signup("bob", "bob@example.com", "hunter2")

        request = backend.requests_to("POST", "/users/")[0]
        assert request.extensions["timeout"]["read"] == 15.0

    def test_failed_auto_login_still_counts(self, session, backend):
        backend.fail("POST", "/auth/token", 500)
        auth = AuthContext(session)

        assert auth.signup("bob", "bob@example.com", "hunter2") == SIGNIN_REGISTERED_PATH
        assert "bob" in backend.users
        assert not auth.is_authenticated

    def test_duplicate_username_raises(self, session):
        auth = AuthContext(session)

        with pytest.raises(ApiRequestError) as exc_info:
            auth.signup("alice", "alice@example.com", "secret")

        assert exc_info.value.detail == "Username already registered"
        assert not auth.is_loading
        assert auth.state == AuthState.ANONYMOUS


class TestLogout:
    """Tests for AuthContext.logout()."""

    def test_logout_clears_everything(self, session):
        auth = AuthContext(session)
        auth.login("alice", "secret")

        assert auth.logout() == SIGNIN_PATH
        assert auth.user is None
        assert auth.state == AuthState.ANONYMOUS
        assert session.store.load() is None
        assert session.api.auth_header is None

    def test_logout_when_anonymous(self, session):
        auth = AuthContext(session)
        auth.initialize()

        auth.logout()

        assert session.store.load() is None


class TestRefreshUser:
    """Tests for AuthContext.refresh_user()."""

    def test_refresh_replaces_cached_user(self, session, backend):
        auth = AuthContext(session)
        auth.login("alice", "secret")
        backend.users["alice"]["bio"] = "Updated"

        assert auth.refresh_user().bio == "Updated"
        assert auth.user.bio == "Updated"

    def test_401_signs_out(self, session, backend):
        auth = AuthContext(session)
        auth.login("alice", "secret")
        backend.tokens.clear()

        with pytest.raises(ApiRequestError):
            auth.refresh_user()

        assert auth.state == AuthState.ANONYMOUS
        assert session.token is None


class TestDropRejectedToken:
    """Tests for AuthContext.drop_rejected_token()."""

    def test_401_signs_out(self, session):
        auth = AuthContext(session)
        auth.login("alice", "secret")

        assert auth.drop_rejected_token(ApiRequestError("Creating link failed", status_code=401))
        assert auth.state == AuthState.ANONYMOUS
        assert not auth.is_authenticated
        assert session.store.load() is None

    def test_other_errors_keep_the_session(self, session):
        auth = AuthContext(session)
        auth.login("alice", "secret")

        assert not auth.drop_rejected_token(ApiRequestError("Creating link failed", status_code=500))
        assert auth.is_authenticated
        assert session.token is not None
