# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, error handlers, router mounting
# - config.py: Environment variable loading and settings
# - auth/: Cookie token store and the sign-in / sign-up pages
# - routers/: Page and health endpoints organized by feature
# - rendering.py + templates/: Jinja2 pages
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
