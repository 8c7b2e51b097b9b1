"""
Location Provider Abstract Base Class

Defines the interface for acquiring the customer's current coordinates,
the equivalent of the browser geolocation capability.

Behavior shared by every provider:
    - A lookup that takes longer than ``timeout`` seconds fails
    - A fix younger than ``maximum_age`` seconds is reused without a lookup
    - Every failure surfaces as LocationUnavailable; nothing is retried

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from tiffin.errors import LocationUnavailable
from tiffin.schemas import UserLocation

logger = logging.getLogger(__name__)


@dataclass
class Coordinates:
    """
    A single location fix.

    Attributes:
        lat: Latitude in degrees
        lng: Longitude in degrees
        accuracy_m: Reported accuracy radius in meters, if known
        source: Provider that produced the fix
        timestamp: Wall-clock time the fix was acquired
    """
    lat: float
    lng: float
    accuracy_m: Optional[float] = None
    source: str = "unknown"
    timestamp: float = field(default_factory=time.time)

    def age(self, now: Optional[float] = None) -> float:
        """Seconds since the fix was acquired."""
        return (now if now is not None else time.time()) - self.timestamp

    def to_user_location(self) -> UserLocation:
        """Wire representation sent with an order."""
        return UserLocation(lat=self.lat, lng=self.lng)


class BaseLocationProvider(ABC):
    """
    Abstract base class for location providers.

    Subclasses implement ``_locate``; callers use ``get_current_location``,
    which adds the timeout budget and the cached-fix tolerance.

    Example:
        >>> provider = get_location_provider()
        >>> coords = await provider.get_current_location()
        >>> print(coords.lat, coords.lng)
    """

    def __init__(self, timeout: float = 10.0, maximum_age: float = 60.0):
        self.timeout = timeout
        self.maximum_age = maximum_age
        self._last_fix: Optional[Coordinates] = None

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the location provider.

        Returns:
            str: Provider name (e.g., "fixed", "ip")
        """
        pass

    @abstractmethod
    async def _locate(self) -> Coordinates:
        """
        Perform one location lookup.

        Raises:
            LocationUnavailable: If the position cannot be determined
        """
        pass

    async def get_current_location(self) -> Coordinates:
        """
        Return the current coordinates.

        Returns:
            Coordinates: A fresh fix, or a cached one within maximum_age

        Raises:
            LocationUnavailable: Denied, unsupported, failed or timed out
        """
        cached = self._last_fix
        if cached is not None and cached.age() <= self.maximum_age:
            logger.debug(f"Location: reusing cached fix ({cached.age():.1f}s old)")
            return cached

        try:
            coords = await asyncio.wait_for(self._locate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Location: {self.provider_name} timed out after {self.timeout}s")
            raise LocationUnavailable(
                "Timed out while determining your location",
                code="timeout",
            )

        self._last_fix = coords
        logger.info(f"Location: {coords.lat:.4f}, {coords.lng:.4f} via {coords.source}")
        return coords

    def clear_cache(self) -> None:
        """Forget the last fix so the next call performs a lookup."""
        self._last_fix = None
