# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the web app.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse


class BranchException(Exception):
    """
    Base exception for the Branch frontend.

    All custom exceptions inherit from this class.
    Provides structured errors with actionable suggestions that pages
    render inline or on the error page.
    """

    def __init__(
        self,
        message: str,
        code: str = "BRANCH_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a template/JSON friendly dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationRequiredError(BranchException):
    """Raised when an anonymous visitor opens an authenticated page."""

    def __init__(self, path: str = "/dashboard"):
        super().__init__(
            message="You need to sign in to view this page",
            code="AUTHENTICATION_REQUIRED",
            status_code=401,
            suggestion="Sign in and try again",
            details={"path": path}
        )


# =============================================================================
# Validation Exceptions
# =============================================================================

class FormValidationError(BranchException):
    """Raised when a submitted form fails client-side checks."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="FORM_VALIDATION_ERROR",
            status_code=400,
            details={"field": field} if field else None
        )


class ThemeValidationError(BranchException):
    """Raised when a custom background is chosen without an image."""

    def __init__(self):
        super().__init__(
            message="Please upload a background image first",
            code="THEME_VALIDATION_ERROR",
            status_code=400,
            suggestion="Upload a wallpaper or pick one of the preset backgrounds",
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidImageError(BranchException):
    """Raised when an uploaded file is not an image."""

    def __init__(self, filename: str, content_type: str | None):
        super().__init__(
            message="Please select an image file",
            code="INVALID_IMAGE",
            status_code=400,
            suggestion="Upload a PNG, JPEG, GIF or WebP image",
            details={"filename": filename, "content_type": content_type}
        )


class ImageTooLargeError(BranchException):
    """Raised when an uploaded image exceeds its size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image size should be less than {max_mb}MB",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb}
        )


class StorageUploadError(BranchException):
    """Raised when an image upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Upload failed: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def authentication_required_handler(
    request: Request,
    exc: AuthenticationRequiredError
) -> RedirectResponse:
    """
    Send anonymous visitors to the sign-in page.

    A cookie that did not resolve to a user is dropped on the way.
    """
    from app.config import settings

    response = RedirectResponse(url="/signin", status_code=303)
    if settings.AUTH_COOKIE_NAME in request.cookies:
        response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return response


async def branch_exception_handler(
    request: Request,
    exc: BranchException
) -> HTMLResponse:
    """
    Render a BranchException as the error page.

    Shows:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    """
    from app.rendering import templates

    return templates.TemplateResponse(
        request,
        "error.html",
        {"error": exc.to_dict()},
        status_code=exc.status_code,
    )


def api_error_status(status_code: int | None) -> int:
    """
    HTTP status for a page that failed on a backend call.

    Backend 4xx are passed through; 5xx and transport failures become 502.
    """
    if status_code and status_code < 500:
        return status_code
    return 502
