"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Fixed location provider, local mock API
    - STAGING: Real IP geolocation against a staging API
    - PRODUCTION: Real IP geolocation against the live API

The ENV_MODE variable controls which capability implementations are
instantiated throughout the client, so the storefront can be exercised
locally without a real backend or location lookup.

Usage:
    from tiffin.core.config import get_settings

    settings = get_settings()
    async with ApiClient(settings.api_base_url) as api:
        foods = await api.list_foods()

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with fixed coordinates and the mock API
        PRODUCTION: Live API and real geolocation
        STAGING: Pre-production API with real geolocation
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Storefront settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    The API origin in particular must be set per deployment; it is never
    baked into the code.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging

        # Remote API
        api_base_url: Origin of the ordering API
        api_timeout_seconds: Transport timeout override (None = httpx default)

        # Session persistence
        session_file: JSON file standing in for browser-local storage
        session_lock_timeout: Seconds to wait for the session file lock

        # Geolocation
        geolocation_timeout_seconds: Budget for one location lookup
        geolocation_maximum_age_seconds: How long a cached fix stays usable

        # Business rules
        min_order_items: Minimum number of units per order
        delivery_radius_km: Service radius announced to customers
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
        default="TiffinBuddy",
        description="Storefront display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    currency_symbol: str = Field(
        default="₹",
        description="Symbol printed in front of prices"
    )

    # ==========================================================================
    # REMOTE API
    # ==========================================================================

    api_base_url: str = Field(
        default="http://localhost:8001",
        description="Base URL of the ordering API"
    )
    api_timeout_seconds: Optional[float] = Field(
        default=None,
        description="Transport timeout for API calls (None keeps the httpx default)"
    )

    # ==========================================================================
    # SESSION STORAGE
    # ==========================================================================

    session_file: str = Field(
        default="~/.tiffin/session.json",
        description="File holding the persisted session"
    )
    session_lock_timeout: int = Field(
        default=10,
        description="Seconds to wait for the session file lock"
    )

    # ==========================================================================
    # GEOLOCATION
    # ==========================================================================

    geolocation_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Maximum time allowed for a location lookup"
    )
    geolocation_maximum_age_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Age under which a cached location is reused"
    )
    ip_geolocation_url: str = Field(
        default="http://ip-api.com/json/",
        description="IP geolocation endpoint used outside development"
    )
    default_latitude: float = Field(
        default=28.6139,
        description="Location reported in development mode"
    )
    default_longitude: float = Field(
        default=77.2090,
        description="Location reported in development mode"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    min_order_items: int = Field(
        default=2,
        ge=1,
        description="Minimum number of item units per order"
    )
    delivery_radius_km: float = Field(
        default=10.0,
        gt=0,
        description="Maximum delivery distance in kilometers"
    )
    restaurant_latitude: float = Field(
        default=28.6139,
        description="Kitchen latitude (mock API delivery origin)"
    )
    restaurant_longitude: float = Field(
        default=77.2090,
        description="Kitchen longitude (mock API delivery origin)"
    )

    # ==========================================================================
    # MOCK API
    # ==========================================================================

    mock_api_host: str = Field(
        default="127.0.0.1",
        description="Host the development API binds to"
    )
    mock_api_port: int = Field(
        default=8001,
        description="Port the development API binds to"
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

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an absolute http(s) origin without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

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
    def use_real_services(self) -> bool:
        """Check if real external capabilities should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def session_path(self) -> Path:
        """Session file with the user's home directory expanded."""
        return Path(self.session_file).expanduser()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once per process so every component sees
    the same API origin and business rules.

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
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("filelock").setLevel(logging.WARNING)

    return logging.getLogger("tiffin")
