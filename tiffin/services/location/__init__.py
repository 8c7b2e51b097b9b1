"""
Location Provider Factory

Provides a single entry point for obtaining a location provider.
Automatically selects the fixed or IP provider based on ENV_MODE.

Usage:
    from tiffin.services.location import get_location_provider

    provider = get_location_provider()
    coords = await provider.get_current_location()
"""

import logging
from functools import lru_cache

from tiffin.core.config import get_settings
from tiffin.services.location.base import BaseLocationProvider, Coordinates
from tiffin.services.location.mock import FixedLocationProvider, UnavailableLocationProvider
from tiffin.services.location.ip import IPGeolocationProvider

logger = logging.getLogger(__name__)


@lru_cache()
def get_location_provider() -> BaseLocationProvider:
    """
    Get the configured location provider.

    Returns:
        BaseLocationProvider: Fixed coordinates in development,
        IP geolocation otherwise
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Location Provider: Using FixedLocationProvider (development mode)")
        return FixedLocationProvider(
            lat=settings.default_latitude,
            lng=settings.default_longitude,
            timeout=settings.geolocation_timeout_seconds,
            maximum_age=settings.geolocation_maximum_age_seconds,
        )

    logger.info(
        f"Location Provider: Using IPGeolocationProvider "
        f"({settings.env_mode.value} mode)"
    )
    return IPGeolocationProvider(
        url=settings.ip_geolocation_url,
        timeout=settings.geolocation_timeout_seconds,
        maximum_age=settings.geolocation_maximum_age_seconds,
    )


def reset_location_provider() -> None:
    """Clear the cached provider instance."""
    get_location_provider.cache_clear()
    logger.debug("Location provider cache cleared")


__all__ = [
    "get_location_provider",
    "reset_location_provider",
    "BaseLocationProvider",
    "Coordinates",
    "FixedLocationProvider",
    "UnavailableLocationProvider",
    "IPGeolocationProvider",
]
