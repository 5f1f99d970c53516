"""
Runtime settings for the location collaborators.

Settings are read once (usually by the CLI) and handed to the clients
that need them; nothing in the package reads the environment on import.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

GOOGLE_GEOCODE_ENDPOINT = "https://maps.googleapis.com/maps/api/geocode/json"
IP_LOCATION_ENDPOINT = "http://ip-api.com/json"


def _float_or_none(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _float_or_default(raw: Optional[str], default: float) -> float:
    value = _float_or_none(raw)
    return default if value is None else value


@dataclass(frozen=True)
class Settings:
    geocoding_api_key: Optional[str] = None
    geocode_endpoint: str = GOOGLE_GEOCODE_ENDPOINT
    geocode_region: str = "India"
    http_timeout: float = 10.0
    geocode_delay: float = 0.2  # seconds between batched geocode calls
    device_latitude: Optional[float] = None
    device_longitude: Optional[float] = None
    ip_location_endpoint: str = IP_LOCATION_ENDPOINT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            geocoding_api_key=env.get("GOOGLE_MAPS_API_KEY") or None,
            geocode_endpoint=env.get("ROOMMATCH_GEOCODE_ENDPOINT", GOOGLE_GEOCODE_ENDPOINT),
            geocode_region=env.get("ROOMMATCH_GEOCODE_REGION", "India"),
            http_timeout=_float_or_default(env.get("ROOMMATCH_HTTP_TIMEOUT"), 10.0),
            geocode_delay=_float_or_default(env.get("ROOMMATCH_GEOCODE_DELAY"), 0.2),
            device_latitude=_float_or_none(env.get("ROOMMATCH_DEVICE_LAT")),
            device_longitude=_float_or_none(env.get("ROOMMATCH_DEVICE_LON")),
            ip_location_endpoint=env.get("ROOMMATCH_IP_LOCATION_ENDPOINT", IP_LOCATION_ENDPOINT),
            log_level=env.get("ROOMMATCH_LOG_LEVEL", "INFO"),
        )
