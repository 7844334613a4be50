# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable clients and utilities:
# - api_client.py: httpx client for the Branch REST API
# - supabase_client.py: Shared Supabase client for object storage
# - utils.py: Shared utilities (error base class, URL helpers)
# =============================================================================

from lib.api_client import ApiRequestError, BranchApiClient
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import ApplicationError, ensure_url_scheme

__all__ = [
    # REST API
    "ApiRequestError",
    "BranchApiClient",
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "ensure_url_scheme",
]
