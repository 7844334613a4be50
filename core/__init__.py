# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the logic behind the pages:
# - models/: Pydantic schemas for users, links and themes
# - session.py: Bearer token session (header + durable store in step)
# - services/: auth context, dashboard, public profile and storage
#
# Code in this package should not build HTTP responses; routers in app/ do.
# =============================================================================
