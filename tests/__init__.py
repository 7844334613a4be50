# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Branch web app:
# - test_models.py: Pydantic models and theme defaulting
# - test_session.py: Session, token stores and the auth cookie
# - test_api_client.py: REST client against the fake backend
# - test_auth_service.py: Auth state machine, login/signup/logout
# - test_storage_service.py: Avatar and wallpaper uploads
# - test_dashboard_service.py: Link, profile and theme editing
# - test_profile_service.py: Public page states
# - test_forms.py: Sign-in / sign-up form checks
# - test_pages.py: Routes through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
