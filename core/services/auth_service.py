# =============================================================================
# core/services/auth_service.py - Auth Context
# =============================================================================
# Holds who is signed in for the lifetime of one Session:
# - state: uninitialized -> checking -> authenticated | anonymous
# - user: cached copy of /me/, replaced (never patched) on every refresh
# - login / signup / logout, each returning the page to navigate to
#
# Errors from the API are never retried here. They are logged and re-raised
# so the page that triggered the action can show its own message.
# =============================================================================

import logging
from enum import Enum

from core.models.user import User
from core.session import Session
from lib.api_client import ApiRequestError

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"
SIGNIN_PATH = "/signin"
SIGNIN_REGISTERED_PATH = "/signin?registered=true"


class AuthState(str, Enum):
    """
    Auth context states.

    Flow: uninitialized -> checking -> authenticated | anonymous
          authenticated -> anonymous (logout or token rejected)
    """
    UNINITIALIZED = "uninitialized"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class AuthContext:
    """
    Current user + auth operations over one Session.

    Example:
        auth = AuthContext(session)
        auth.initialize()
        if not auth.is_authenticated:
            next_path = auth.login("alice", "secret")   # "/dashboard"
    """

    def __init__(self, session: Session):
        self.session = session
        self.user: User | None = None
        self.state = AuthState.UNINITIALIZED
        self._pending = 0

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def api(self):
        return self.session.api

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_loading(self) -> bool:
        """True until the first check settles, and while login or signup runs."""
        return self.state in (AuthState.UNINITIALIZED, AuthState.CHECKING) or self._pending > 0

    # -------------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------------

    def _become_authenticated(self, user: User) -> None:
        self.user = user
        self.state = AuthState.AUTHENTICATED

    def _become_anonymous(self) -> None:
        self.session.set_auth_token(None)
        self.user = None
        self.state = AuthState.ANONYMOUS

    def _settle(self) -> None:
        # A login or signup before initialize() still ends the loading phase
        if self.state in (AuthState.UNINITIALIZED, AuthState.CHECKING):
            self.state = AuthState.AUTHENTICATED if self.user else AuthState.ANONYMOUS

    def drop_rejected_token(self, error: ApiRequestError) -> bool:
        """
        Sign out if the API rejected the token.

        Returns:
            True when error was a 401 and the context is now anonymous
        """
        if not error.is_unauthorized:
            return False
        logger.info("Token rejected by the API, signing out")
        self._become_anonymous()
        return True

    def initialize(self) -> AuthState:
        """
        Rehydrate the stored token and resolve the current user.

        Any failure (401, 5xx, network) clears the token and leaves the
        context anonymous. Calling it again is a no-op.
        """
        if self.state != AuthState.UNINITIALIZED:
            return self.state

        self.state = AuthState.CHECKING
        if self.session.rehydrate() is None:
            self.state = AuthState.ANONYMOUS
            return self.state

        user = self.refresh_auth_state()
        if user is None:
            self._become_anonymous()
        else:
            self._become_authenticated(user)
        return self.state

    def refresh_auth_state(self) -> User | None:
        """
        Fetch /me/ if a token is installed.

        Returns None (and clears the token) on any failure instead of raising.
        """
        if not self.session.token:
            return None
        try:
            return self.api.get_current_user()
        except ApiRequestError as e:
            logger.warning(f"Auth check failed: {e.message}")
            self.session.set_auth_token(None)
            return None

    def refresh_user(self) -> User:
        """
        Re-fetch the signed-in user after a mutation.

        A 401 means the backend rejected the token: the context falls back
        to anonymous before the error is re-raised.
        """
        try:
            user = self.api.get_current_user()
        except ApiRequestError as e:
            self.drop_rejected_token(e)
            raise
        self._become_authenticated(user)
        return user

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def _sign_in(self, username: str, password: str) -> User:
        token = self.api.login(username, password).access_token
        self.session.set_auth_token(token)
        try:
            user = self.api.get_current_user()
        except ApiRequestError:
            # Don't keep a token we couldn't resolve to a user
            self.session.set_auth_token(None)
            raise
        self._become_authenticated(user)
        return user

    def login(self, username: str, password: str) -> str:
        """
        Exchange credentials for a token and load the user.

        Returns:
            Path to navigate to ("/dashboard")

        Raises:
            ApiRequestError: Bad credentials or unreachable API; the token
                is not installed in that case
        """
        self._pending += 1
        try:
            self._sign_in(username, password)
            logger.info(f"User signed in: {username}")
            return DASHBOARD_PATH
        except ApiRequestError as e:
            logger.error(f"Login failed: {e.message}")
            raise
        finally:
            self._pending -= 1
            self._settle()

    def signup(self, username: str, email: str, password: str) -> str:
        """
        Create an account, then try to sign straight in.

        Account creation and the automatic login are independent: if only
        the login fails the signup still counts as done and the visitor is
        sent to the sign-in page with ?registered=true.

        Returns:
            "/dashboard" or "/signin?registered=true"

        Raises:
            ApiRequestError: Account creation failed
        """
        self._pending += 1
        try:
            try:
                self.api.signup(username, email, password)
            except ApiRequestError as e:
                logger.error(f"Signup failed with error: {e.message}")
                raise

            try:
                self._sign_in(username, password)
            except ApiRequestError as e:
                logger.error(f"Auto-login after signup failed: {e.message}")
                return SIGNIN_REGISTERED_PATH

            logger.info(f"User signed up: {username}")
            return DASHBOARD_PATH
        finally:
            self._pending -= 1
            self._settle()

    def logout(self) -> str:
        """Forget the token and the user. No server call is needed."""
        self._become_anonymous()
        return SIGNIN_PATH
