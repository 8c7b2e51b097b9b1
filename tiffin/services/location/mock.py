"""
Mock Location Providers

Stand-ins for the platform location capability, used in development mode
(ENV_MODE=development) and in tests.

Behavior:
    - FixedLocationProvider reports configured coordinates after an
      optional simulated delay
    - UnavailableLocationProvider always fails, as when the user denies
      the permission prompt or the capability is absent
"""

import asyncio
import logging

from tiffin.errors import LocationUnavailable
from tiffin.services.location.base import BaseLocationProvider, Coordinates

logger = logging.getLogger(__name__)


class FixedLocationProvider(BaseLocationProvider):
    """
    Always reports the same coordinates.

    Example:
        >>> provider = FixedLocationProvider(28.6139, 77.2090)
        >>> coords = await provider.get_current_location()
        >>> coords.lat
        28.6139
    """

    def __init__(
        self,
        lat: float,
        lng: float,
        latency: float = 0.0,
        timeout: float = 10.0,
        maximum_age: float = 60.0,
    ):
        super().__init__(timeout=timeout, maximum_age=maximum_age)
        self.lat = lat
        self.lng = lng
        self.latency = latency
        self.lookups = 0

        logger.info(f"FixedLocationProvider initialized ({lat:.4f}, {lng:.4f})")

    @property
    def provider_name(self) -> str:
        return "fixed"

    async def _locate(self) -> Coordinates:
        self.lookups += 1
        if self.latency:
            await asyncio.sleep(self.latency)
        return Coordinates(lat=self.lat, lng=self.lng, accuracy_m=0.0, source=self.provider_name)


class UnavailableLocationProvider(BaseLocationProvider):
    """Fails every lookup with the configured reason."""

    def __init__(self, reason: str = "User denied Geolocation", code: str = "permission_denied"):
        super().__init__()
        self.reason = reason
        self.code = code

    @property
    def provider_name(self) -> str:
        return "unavailable"

    async def _locate(self) -> Coordinates:
        logger.debug(f"Location unavailable: {self.reason}")
        raise LocationUnavailable(f"Location error: {self.reason}", code=self.code)
