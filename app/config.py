# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
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
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # The primary (hosted) project is required - app won't start without it

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Primary Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key for the primary project"
    )

    # Local stack started with `supabase start`, used when offline
    SUPABASE_LOCAL_URL: str | None = Field(
        default=None,
        description="Local Supabase URL (fallback when the primary is unreachable)"
    )

    SUPABASE_LOCAL_SERVICE_KEY: str | None = Field(
        default=None,
        description="service_role key for the local Supabase stack"
    )

    CONNECTIVITY_PROBE_HOST: str = Field(
        default="google.com",
        description="Host resolved at startup to decide whether we are online"
    )

    # -------------------------------------------------------------------------
    # Redis Configuration (cross-process room relay)
    # -------------------------------------------------------------------------
    # Unset means a single process: room events stay in memory

    REDIS_URL: str | None = Field(
        default=None,
        description="Redis URL for relaying room events between API processes"
    )

    # -------------------------------------------------------------------------
    # Email / Contact Form
    # -------------------------------------------------------------------------

    EMAIL_USER: str | None = Field(
        default=None,
        description="SMTP username, also used as the sender address"
    )

    EMAIL_PASS: str | None = Field(
        default=None,
        description="SMTP password (Gmail app password)"
    )

    SMTP_HOST: str = Field(
        default="smtp.gmail.com",
        description="SMTP server host"
    )

    SMTP_PORT: int = Field(
        default=465,
        ge=1,
        le=65535,
        description="SMTP server port"
    )

    SMTP_USE_SSL: bool = Field(
        default=True,
        description="Connect with implicit SSL (465). False uses STARTTLS."
    )

    CONTACT_RECIPIENT: str | None = Field(
        default=None,
        description="Inbox receiving contact messages (defaults to EMAIL_USER)"
    )

    CONTACT_REQUIRE_SUBJECT: bool = Field(
        default=False,
        description="Reject contact submissions without a subject"
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

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty values as unset
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:5173, https://myapp.com" -> ["http://localhost:5173", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def contact_recipient(self) -> str | None:
        """Inbox for contact messages, falling back to the sender account."""
        return self.CONTACT_RECIPIENT or self.EMAIL_USER

    @property
    def smtp_configured(self) -> bool:
        """Check if SMTP credentials are present."""
        return bool(self.EMAIL_USER and self.EMAIL_PASS)

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
