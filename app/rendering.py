# =============================================================================
# app/rendering.py - Page Rendering Helpers
# =============================================================================
# Jinja2 templates plus the two ways a page handler answers:
# - render(): an HTML page
# - redirect(): a 303 to another page (post/redirect/get)
#
# Both flush the Session's pending cookie write onto the response they build.
# A handler that returns its own Response bypasses FastAPI's injected
# Response object, so cookies have to be attached here.
# =============================================================================

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from app.config import settings
from core.models.theme import FONT_LABELS, PAGE_BACKGROUNDS, ButtonStyle
from core.session import Session

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals.update(
    app_name="Branch",
    settings=settings,
    page_backgrounds=PAGE_BACKGROUNDS,
    button_styles=[style.value for style in ButtonStyle],
    font_labels=FONT_LABELS,
)


def render(
    request: Request,
    template: str,
    context: dict[str, Any] | None = None,
    session: Session | None = None,
    status_code: int = 200,
):
    """
    Render a template, committing cookie changes from the session.

    Args:
        request: Current request
        template: Template file name under app/templates
        context: Template variables
        session: Session whose token changes must reach the browser
        status_code: HTTP status of the page
    """
    response = templates.TemplateResponse(
        request,
        template,
        context or {},
        status_code=status_code,
    )
    if session is not None:
        session.apply_to(response)
    return response


def redirect(url: str, session: Session | None = None) -> RedirectResponse:
    """303 redirect, committing cookie changes from the session."""
    response = RedirectResponse(url, status_code=303)
    if session is not None:
        session.apply_to(response)
    return response
