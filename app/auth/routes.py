# =============================================================================
# app/auth/routes.py - Sign-in / Sign-up Pages
# =============================================================================
# GET renders the form, POST validates it, calls the auth context and
# redirects. Failed attempts re-render the form with an inline error.
# =============================================================================

import logging

from fastapi import APIRouter, Form, Request

from app.auth.forms import validate_signin, validate_signup
from app.dependencies import AuthDep
from app.exceptions import FormValidationError, api_error_status
from app.rendering import redirect, render
from core.services.auth_service import DASHBOARD_PATH
from lib.api_client import ApiRequestError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

REGISTERED_NOTICE = "Account created successfully! Please sign in."
INVALID_CREDENTIALS = "Invalid username or password. Please try again."
LOGIN_FAILED = "Login failed. Please check your connection and try again."
SIGNUP_FAILED = "An error occurred during signup. Please try again."


def signin_error_message(error: ApiRequestError) -> str:
    """Message shown above the sign-in form for a failed login."""
    if error.is_unauthorized:
        return INVALID_CREDENTIALS
    if isinstance(error.detail, str) and error.detail:
        return error.detail
    return LOGIN_FAILED


# =============================================================================
# Sign in
# =============================================================================

@router.get("/signin")
def signin_page(request: Request, auth: AuthDep, registered: bool = False):
    """Sign-in form. Signed-in visitors go straight to the dashboard."""
    if auth.is_authenticated:
        return redirect(DASHBOARD_PATH, auth.session)

    return render(
        request,
        "signin.html",
        {"notice": REGISTERED_NOTICE if registered else None, "username": ""},
        session=auth.session,
    )


@router.post("/signin")
def signin_submit(
    request: Request,
    auth: AuthDep,
    username: str = Form(""),
    password: str = Form(""),
):
    """
    Log in with username and password.

    Redirects to the dashboard on success; otherwise the form is shown
    again with the reason.
    """
    username = username.strip()
    try:
        validate_signin(username, password)
        next_path = auth.login(username, password)
    except FormValidationError as e:
        error, status_code = e.message, e.status_code
    except ApiRequestError as e:
        error, status_code = signin_error_message(e), api_error_status(e.status_code)
    else:
        return redirect(next_path, auth.session)

    return render(
        request,
        "signin.html",
        {"error": error, "username": username},
        session=auth.session,
        status_code=status_code,
    )


# =============================================================================
# Sign up
# =============================================================================

@router.get("/signup")
def signup_page(request: Request, auth: AuthDep):
    if auth.is_authenticated:
        return redirect(DASHBOARD_PATH, auth.session)
    return render(request, "signup.html", {"username": "", "email": ""}, session=auth.session)


@router.post("/signup")
def signup_submit(
    request: Request,
    auth: AuthDep,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
):
    """
    Create an account and sign in.

    When the account is created but the automatic login fails, the visitor
    lands on /signin?registered=true.
    """
    username = username.strip()
    email = email.strip()
    try:
        validate_signup(username, email, password)
        next_path = auth.signup(username, email, password)
    except FormValidationError as e:
        error, status_code = e.message, e.status_code
    except ApiRequestError as e:
        # The backend detail is logged by AuthContext.signup, not shown
        error, status_code = SIGNUP_FAILED, api_error_status(e.status_code)
    else:
        return redirect(next_path, auth.session)

    return render(
        request,
        "signup.html",
        {"error": error, "username": username, "email": email},
        session=auth.session,
        status_code=status_code,
    )


# =============================================================================
# Sign out
# =============================================================================

@router.post("/logout")
def logout(auth: AuthDep):
    """Drop the auth cookie and go back to the sign-in page."""
    next_path = auth.logout()
    logger.info("User signed out")
    return redirect(next_path, auth.session)
