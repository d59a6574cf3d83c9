# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single, immutable Settings class with all configuration values.
#
# Usage:
#   from app.config import get_settings
#   settings = get_settings()
#   app = create_app(settings)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings are built once at startup and handed to every component that
# needs them. Nothing in the app reads a module-level settings global.
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

    The model is frozen: once built it cannot be mutated.
    """

    # -------------------------------------------------------------------------
    # Listener
    # -------------------------------------------------------------------------
    # PORT is required - the server refuses to start without it

    PORT: int = Field(
        ...,  # ... means required (no default)
        ge=1,
        le=65535,
        description="Port the HTTP listener binds to"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the HTTP listener to"
    )

    # -------------------------------------------------------------------------
    # Database Configuration
    # -------------------------------------------------------------------------

    DATABASE_URL: str = Field(
        ...,
        description="Database URL (Supabase project URL, e.g. https://xxx.supabase.co)"
    )

    DATABASE_KEY: str = Field(
        ...,
        description="Database service key (Supabase service_role key)"
    )

    DATABASE_POOL_SIZE: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Number of database clients kept in the pool"
    )

    # -------------------------------------------------------------------------
    # HTTP Pipeline
    # -------------------------------------------------------------------------

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:4200,https://your-frontend.vercel.app",
        description="Origins allowed to make credentialed cross-origin requests (comma-separated)"
    )

    JSON_BODY_LIMIT_BYTES: int = Field(
        default=100 * 1024,
        ge=1,
        description="Largest JSON request body accepted, in bytes"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing auth tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )

    JWT_EXPIRES_MINUTES: int = Field(
        default=7 * 24 * 60,
        ge=1,
        description="Lifetime of issued auth tokens, in minutes"
    )

    AUTH_COOKIE_NAME: str = Field(
        default="token",
        min_length=1,
        description="Name of the cookie carrying the auth token"
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
        description="Enable debug mode (verbose logging)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty env vars as unset
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
        # Settings never change after startup
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list, keeping declaration order.

        Handles comma-separated values, strips whitespace, drops blanks.
        Example: "http://localhost:4200, https://myapp.com" -> ["http://localhost:4200", "https://myapp.com"]
        """
        origins = []
        for origin in self.CORS_ORIGINS.split(","):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    @property
    def allowed_origins(self) -> frozenset[str]:
        """The CORS allow-list as a set for membership checks."""
        return frozenset(self.cors_origins_list)

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

    Raises:
        pydantic.ValidationError: If required variables are missing or invalid
    """
    return Settings()
