"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses the mock description generator (no API keys needed)
    - PRODUCTION: Uses the real Gemini text-generation API

The ENV_MODE variable controls which services are instantiated throughout
the application. STORAGE_BACKEND independently selects where the menu,
order history and cloud configuration blobs are kept.

Usage:
    from brewhouse.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock services
    else:
        # Use real APIs

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with mock services
        PRODUCTION: Live environment with real API integrations
        STAGING: Pre-production testing with real APIs but test keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class StorageBackend(str, Enum):
    """Where persisted blobs live."""
    SQL = "sql"
    MEMORY = "memory"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (API keys, the admin secret) should NEVER be committed
    to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # Storage
        database_url: SQLAlchemy connection string for the blob table
        storage_backend: sql or memory

        # External Services (Required in production)
        gemini_api_key: Google Gemini API key for menu descriptions

        # Business Configuration
        admin_secret: Shared secret for the staff dashboard
        cloud_sync_interval_seconds: Timer period of the simulated cloud feed
        cloud_order_probability: Chance that a sync tick injects an order
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Brewhouse Storefront",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8001,
        description="API server port"
    )

    # ==========================================================================
    # STORAGE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite:///./data/brewhouse.db",
        description="SQLAlchemy connection URL for the blob store"
    )
    storage_backend: StorageBackend = Field(
        default=StorageBackend.SQL,
        description="Blob store backend (sql or memory)"
    )

    # ==========================================================================
    # GEMINI (MENU DESCRIPTIONS)
    # ==========================================================================

    gemini_api_key: Optional[str] = Field(
        default=None,
        description="Google Gemini API key"
    )
    gemini_model: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model used for menu descriptions"
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini REST API base URL"
    )
    description_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single description request"
    )

    # ==========================================================================
    # STAFF ACCESS
    # ==========================================================================

    admin_secret: str = Field(
        default="admin",
        description="Shared access key for the staff dashboard"
    )

    # ==========================================================================
    # CLOUD SYNC (SIMULATED)
    # ==========================================================================

    cloud_sync_interval_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between simulated cloud sync ticks"
    )
    cloud_order_probability: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Probability that a sync tick injects a remote order"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    shop_name: str = Field(
        default="Brewhouse",
        description="Shop display name"
    )
    currency_symbol: str = Field(
        default="$",
        description="Currency symbol used in summaries"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def validate_storage_backend(cls, v: str) -> StorageBackend:
        """Convert string to StorageBackend enum."""
        if isinstance(v, StorageBackend):
            return v
        try:
            return StorageBackend(v.lower())
        except ValueError:
            valid = [e.value for e in StorageBackend]
            raise ValueError(f"Invalid storage_backend. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.gemini_api_key:
                missing.append("GEMINI_API_KEY")
            if self.admin_secret == "admin":
                missing.append("ADMIN_SECRET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process; call ``get_settings.cache_clear()``
    after changing the environment (tests do this).

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("brewhouse")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
