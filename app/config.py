# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.API_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Branch REST API
    # -------------------------------------------------------------------------
    # The remote backend that owns users, links and profiles

    API_URL: str = Field(
        default="http://localhost:8000",
        description="Base URL of the Branch REST API (without the /api/v1 prefix)"
    )

    API_PREFIX: str = Field(
        default="/api/v1",
        description="Path prefix of the versioned REST endpoints"
    )

    API_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Default timeout for every REST request"
    )

    SIGNUP_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Timeout for account creation (slower on cold backends)"
    )

    # -------------------------------------------------------------------------
    # Supabase Storage Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key used for storage writes"
    )

    STORAGE_BUCKET: str = Field(
        default="user-content",
        description="Bucket holding avatars and wallpapers"
    )

    # -------------------------------------------------------------------------
    # Session Cookie
    # -------------------------------------------------------------------------

    AUTH_COOKIE_NAME: str = Field(
        default="authToken",
        description="Cookie holding the bearer token"
    )

    AUTH_COOKIE_MAX_AGE_DAYS: int = Field(
        default=30,
        ge=1,
        le=365,
        description="How long the browser keeps the token cookie"
    )

    COOKIE_SECURE: bool = Field(
        default=False,
        description="Send the token cookie over HTTPS only"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------

    MAX_AVATAR_SIZE_MB: int = Field(
        default=2,
        ge=1,
        le=50,
        description="Maximum avatar size in MB"
    )

    MAX_WALLPAPER_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum wallpaper size in MB"
    )

    DEFAULT_AVATAR_URL: str = Field(
        default="https://cdn.jsdelivr.net/gh/alohe/avatars/png/vibrent_1.png",
        description="Avatar shown on public pages when the user has none"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    APP_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the web server to"
    )

    APP_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the web server"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # Don't fail if .env doesn't exist (useful for production where
        # env vars are set directly)
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def api_base_url(self) -> str:
        """API_URL without a trailing slash."""
        return self.API_URL.rstrip("/")

    @property
    def max_avatar_size_bytes(self) -> int:
        return self.MAX_AVATAR_SIZE_MB * 1024 * 1024

    @property
    def max_wallpaper_size_bytes(self) -> int:
        return self.MAX_WALLPAPER_SIZE_MB * 1024 * 1024

    @property
    def auth_cookie_max_age(self) -> int:
        """Cookie lifetime in seconds."""
        return self.AUTH_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
