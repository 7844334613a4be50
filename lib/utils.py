# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any


# =============================================================================
# URL Utilities
# =============================================================================

def ensure_url_scheme(url: str, default_scheme: str = "https") -> str:
    """
    Prepend a scheme to a link URL when the user left it out.

    Anything already starting with "http" (http:// or https://) is kept as is.

    Args:
        url: URL as typed by the user
        default_scheme: Scheme to prepend when missing

    Returns:
        URL with a scheme

    Example:
        ensure_url_scheme("example.com")          # "https://example.com"
        ensure_url_scheme("http://example.com")   # "http://example.com"
    """
    url = url.strip()
    if url.startswith("http"):
        return url
    return f"{default_scheme}://{url}"


def file_extension(filename: str) -> str:
    """Return the part after the last dot (the whole name if there is none)."""
    return filename.rsplit(".", 1)[-1]


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
