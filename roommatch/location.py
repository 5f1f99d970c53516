"""
Best-effort "where am I" lookup for distance badges and nearby sorting.

A provider is any callable returning Coordinates (or None). The caller
picks one at startup and passes it in; `resolve_current_device_location`
makes exactly one attempt and reduces every failure to None.
"""

from typing import Callable, Optional

import requests

from .config import IP_LOCATION_ENDPOINT, Settings
from .logger import StructuredLogger, get_logger
from .models import Coordinates
from .schema import validate_coordinates

LocationProvider = Callable[[], Optional[Coordinates]]


class LocationUnavailable(Exception):
    """The platform could not produce a position."""
    pass


class StaticLocationProvider:
    """Fixed coordinates from configuration; no coordinates means no capability."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float]):
        self.latitude = latitude
        self.longitude = longitude

    def __call__(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            raise LocationUnavailable("No device coordinates configured")
        return Coordinates(self.latitude, self.longitude)


class IpLocationProvider:
    """Approximate position from an ip-api.com style JSON endpoint."""

    def __init__(
        self,
        endpoint: str = IP_LOCATION_ENDPOINT,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self) -> Optional[Coordinates]:
        resp = self.session.get(self.endpoint, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") != "success":
            raise LocationUnavailable(f"IP lookup failed: {data.get('message', 'unknown')}")
        return Coordinates(float(data["lat"]), float(data["lon"]))


def provider_from_settings(settings: Settings, use_ip: bool = False) -> LocationProvider:
    if use_ip:
        return IpLocationProvider(settings.ip_location_endpoint, timeout=settings.http_timeout)
    return StaticLocationProvider(settings.device_latitude, settings.device_longitude)


def resolve_current_device_location(
    provider: Optional[LocationProvider],
    logger: Optional[StructuredLogger] = None,
) -> Optional[Coordinates]:
    """
    Ask the provider for the current position once.

    Returns:
        Coordinates, or None if there is no provider, it fails, or it
        returns nothing usable. Never raises.
    """
    logger = logger or get_logger()
    if provider is None:
        logger.record_location_lookup(False, "Unsupported")
        logger.info("No location provider available")
        return None

    try:
        coords = provider()
    except Exception as e:
        # Permission denied, no hardware and network errors all mean "unknown"
        logger.record_location_lookup(False, type(e).__name__)
        logger.warning("Current location unavailable", error=str(e))
        return None

    if coords is None or not validate_coordinates(coords.latitude, coords.longitude):
        logger.record_location_lookup(False, "NoPosition")
        logger.warning("Location provider returned no usable position")
        return None

    logger.record_location_lookup(True)
    return coords
