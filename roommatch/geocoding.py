"""
Forward geocoding of free-text addresses via the Google Geocoding API.

`GeocodingClient.lookup` reports provider and transport failures as
`GeocodingError` so batch callers can tell "not found" apart from "the
service is failing". `resolve_forward_geocode` is the never-raising
contract used everywhere else: coordinates or None.
"""

from typing import Any, Dict, Optional

import requests

from .config import GOOGLE_GEOCODE_ENDPOINT, Settings
from .logger import StructuredLogger, get_logger
from .models import Coordinates
from .schema import validate_coordinates

NOT_FOUND_STATUSES = {"ZERO_RESULTS"}


class GeocodingError(Exception):
    """The provider could not answer (transport error, quota, bad key)."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


def build_address(location: Optional[str], city: Optional[str], region: Optional[str] = None) -> str:
    """Join the non-blank address parts, e.g. "Powai, Mumbai, India"."""
    parts = [p.strip() for p in (location, city, region) if isinstance(p, str) and p.strip()]
    return ", ".join(parts)


class GeocodingClient:
    """Single-shot geocoder; makes exactly one HTTP request per lookup."""

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = GOOGLE_GEOCODE_ENDPOINT,
        region: str = "India",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        if not api_key:
            raise ValueError("Missing GOOGLE_MAPS_API_KEY. Set env var or pass api_key.")
        self.api_key = api_key
        self.endpoint = endpoint
        self.region = region
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> "GeocodingClient":
        return cls(
            api_key=settings.geocoding_api_key,
            endpoint=settings.geocode_endpoint,
            region=settings.geocode_region,
            timeout=settings.http_timeout,
            session=session,
            logger=logger,
        )

    def lookup(self, address: str) -> Optional[Coordinates]:
        """
        Geocode an address.

        Returns:
            Coordinates of the first result, or None if the provider has no match

        Raises:
            GeocodingError: On HTTP errors, timeouts, malformed responses or
                provider error statuses
        """
        if not isinstance(address, str) or not address.strip():
            return None

        self.logger.record_geocode_attempt()
        try:
            resp = self.session.get(
                self.endpoint,
                params={"address": address.strip(), "key": self.api_key},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            raise self._fail(f"HTTPError_{status}", f"Geocoding request failed ({status})", address)
        except requests.exceptions.Timeout:
            raise self._fail("Timeout", "Geocoding request timed out", address)
        except requests.exceptions.RequestException as e:
            raise self._fail("RequestException", f"Geocoding request error: {e}", address)

        try:
            data = resp.json()
        except ValueError:
            raise self._fail("InvalidJSON", "Geocoding response was not JSON", address)

        return self._parse(data, address)

    def _parse(self, data: Any, address: str) -> Optional[Coordinates]:
        if not isinstance(data, dict):
            raise self._fail("MalformedResponse", "Geocoding response was not an object", address)

        status = data.get("status")
        results = data.get("results") or []
        if status in NOT_FOUND_STATUSES or (status == "OK" and not results):
            self.logger.record_geocode_failure("ZERO_RESULTS")
            self.logger.info("No geocoding match", address=address)
            return None
        if status != "OK":
            raise self._fail(
                str(status or "UnknownStatus"),
                f"Geocoding failed: {status} {data.get('error_message', '')}".rstrip(),
                address,
            )

        try:
            loc: Dict[str, Any] = results[0]["geometry"]["location"]
            coords = Coordinates(latitude=float(loc["lat"]), longitude=float(loc["lng"]))
        except (KeyError, IndexError, TypeError, ValueError):
            raise self._fail("MalformedResponse", "Geocoding result had no location", address)
        if not validate_coordinates(coords.latitude, coords.longitude):
            raise self._fail("InvalidCoordinates", "Geocoding result out of range", address)

        self.logger.record_geocode_success()
        self.logger.debug(
            "Geocoded address",
            address=address,
            latitude=coords.latitude,
            longitude=coords.longitude,
        )
        return coords

    def _fail(self, reason: str, message: str, address: str) -> GeocodingError:
        self.logger.record_geocode_failure(reason)
        self.logger.warning(message, address=address, reason=reason)
        return GeocodingError(message, reason)

    def resolve_forward_geocode(self, address: str) -> Optional[Coordinates]:
        """Coordinates for a free-text address, or None. Never raises."""
        try:
            return self.lookup(address)
        except GeocodingError:
            return None

    def geocode_location(self, location: Optional[str], city: Optional[str]) -> Optional[Coordinates]:
        """Geocode a neighbourhood within a city, qualified by the configured region."""
        if not build_address(location, city):
            return None
        return self.resolve_forward_geocode(build_address(location, city, self.region))
