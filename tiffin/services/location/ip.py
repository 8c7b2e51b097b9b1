"""
IP Geolocation Provider

Production location provider. Resolves the machine's approximate position
from its public IP address through an HTTP geolocation service.
Used when ENV_MODE=production or ENV_MODE=staging.

Supported response formats:
    - ip-api.com: {"status": "success", "lat": ..., "lon": ...}
    - ipapi.co style: {"latitude": ..., "longitude": ...}
"""

import logging
from typing import Any, Optional

import httpx

from tiffin.errors import LocationUnavailable
from tiffin.services.location.base import BaseLocationProvider, Coordinates

logger = logging.getLogger(__name__)


class IPGeolocationProvider(BaseLocationProvider):
    """
    Locates the customer from the public IP address.

    Accuracy is city-level at best, which is enough for a delivery radius
    measured in kilometers.

    Configuration:
        Endpoint from IP_GEOLOCATION_URL.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        maximum_age: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(timeout=timeout, maximum_age=maximum_age)
        self.url = url
        self._transport = transport

        logger.info(f"IPGeolocationProvider initialized ({url})")

    @property
    def provider_name(self) -> str:
        return "ip"

    @staticmethod
    def _parse(payload: Any) -> tuple[float, float]:
        """
        Extract (lat, lng) from a geolocation response.

        Raises:
            LocationUnavailable: If the service reported a failure
        """
        if not isinstance(payload, dict):
            raise LocationUnavailable("Location service returned an unexpected response")

        if payload.get("status") == "fail":
            reason = payload.get("message") or "lookup failed"
            raise LocationUnavailable(f"Location error: {reason}", code="lookup_failed")

        lat = payload.get("lat", payload.get("latitude"))
        lng = payload.get("lon", payload.get("lng", payload.get("longitude")))
        if lat is None or lng is None:
            raise LocationUnavailable("Location service did not return coordinates")

        try:
            return float(lat), float(lng)
        except (TypeError, ValueError):
            raise LocationUnavailable("Location service returned invalid coordinates")

    async def _locate(self) -> Coordinates:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"IP geolocation: HTTP {e.response.status_code}")
            raise LocationUnavailable(
                "Location service is unavailable",
                code="service_unavailable",
            )
        except httpx.TransportError as e:
            logger.error(f"IP geolocation: transport error - {e}")
            raise LocationUnavailable(
                "Unable to reach the location service",
                code="transport_error",
            )
        except ValueError:
            raise LocationUnavailable("Location service returned an unexpected response")

        lat, lng = self._parse(payload)
        return Coordinates(lat=lat, lng=lng, source=self.provider_name)
