# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides the shared Supabase client used for object storage
# (avatars and wallpapers). It implements the singleton pattern to reuse a
# single client connection.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   bucket = SupabaseClient.bucket("user-content")
#   bucket.list("avatars/42")
# =============================================================================

from __future__ import annotations

import logging
from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Errors should tell HOW to fix, not just WHAT failed.
    """

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class SupabaseClient:
    """
    Shared Supabase client.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        bucket = SupabaseClient.bucket(settings.STORAGE_BUCKET)
        files = bucket.list("wallpapers/42")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the service_role key: uploads and deletes happen server-side
        on behalf of the signed-in user.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return cls._instance

    @classmethod
    def bucket(cls, name: str | None = None):
        """
        Get a storage bucket handle.

        Args:
            name: Bucket name (defaults to settings.STORAGE_BUCKET)

        Returns:
            Bucket file API (list/upload/remove/get_public_url)
        """
        return cls.get_client().storage.from_(name or settings.STORAGE_BUCKET)
