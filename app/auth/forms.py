# =============================================================================
# app/auth/forms.py - Sign-in / Sign-up Form Checks
# =============================================================================
# Client-side validation that runs before any request is sent.
# =============================================================================

import re

from app.exceptions import FormValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
MIN_PASSWORD_LENGTH = 6


def validate_signin(username: str, password: str) -> None:
    if not username or not password:
        raise FormValidationError("Username and password are required")


def validate_signup(username: str, email: str, password: str) -> None:
    """
    Check the sign-up form.

    Raises:
        FormValidationError: With the message shown above the form
    """
    if not username or not email or not password:
        raise FormValidationError("All fields are required")

    if not EMAIL_PATTERN.match(email):
        raise FormValidationError("Please enter a valid email address", field="email")

    if not USERNAME_PATTERN.match(username):
        raise FormValidationError(
            "Username can only contain letters, numbers, and underscores",
            field="username",
        )

    if len(password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            field="password",
        )
