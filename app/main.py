# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Branch web app.
# It configures the FastAPI application with routers and handlers.
#
# Usage:
#   uvicorn app.main:app --reload --port 3000
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    AuthenticationRequiredError,
    BranchException,
    authentication_required_handler,
    branch_exception_handler,
)
from app.rendering import render
from app.routers import dashboard, health, profile

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the configuration on startup and shutdown. Every API client is
    per-request, so there is nothing shared to open or close here.
    """
    logger.info(f"Starting Branch in {settings.ENVIRONMENT} mode")
    logger.info(f"REST API: {settings.api_base_url}")

    yield

    logger.info("Shutting down Branch")


# Create FastAPI application
app = FastAPI(
    title="Branch",
    description="One link for everything: a public page with all your links.",
    version="1.0.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url=None,
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign-in, sign-up and sign-out pages",
        },
        {
            "name": "Dashboard",
            "description": "Manage links, profile and theme",
        },
        {
            "name": "Health",
            "description": "App health and readiness checks",
        },
        {
            "name": "Profile",
            "description": "Public link pages",
        },
    ],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AuthenticationRequiredError)
async def handle_authentication_required(request: Request, exc: AuthenticationRequiredError):
    """Redirect anonymous visitors to sign in."""
    return await authentication_required_handler(request, exc)


@app.exception_handler(BranchException)
async def handle_branch_exception(request: Request, exc: BranchException):
    """Handle custom Branch exceptions."""
    return await branch_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return render(
        request,
        "error.html",
        {
            "error": {
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        },
        status_code=500,
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(health.router, tags=["Health"])

# Sign-in / sign-up pages
app.include_router(auth_routes.router)

# Dashboard pages
app.include_router(dashboard.router)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", include_in_schema=False)
def root():
    """The dashboard is the home page; it bounces anonymous visitors to /signin."""
    return RedirectResponse("/dashboard", status_code=303)


# Public pages match any single path segment, so they go last
app.include_router(profile.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=settings.is_development,
    )
