"""
Backfill missing coordinates on stored listings and requests.

Documents are geocoded one at a time with a pause after every provider
call. A circuit breaker stops the run from hammering a provider that keeps
failing; documents reached while it is open count as failed.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from .circuit import CircuitBreaker, CircuitOpenError
from .geocoding import GeocodingClient, GeocodingError, build_address
from .logger import get_logger


@dataclass
class BatchResult:
    success: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.success + self.failed + self.skipped


def has_coordinates(doc: Dict[str, Any]) -> bool:
    lat = doc.get("latitude")
    lon = doc.get("longitude")
    return bool(lat) and lon is not None


def geocode_documents(
    docs: Iterable[Dict[str, Any]],
    client: GeocodingClient,
    delay: float = 0.2,
    breaker: Optional[CircuitBreaker] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchResult:
    """
    Geocode documents in place, writing `latitude`/`longitude` on success.

    Args:
        docs: Listing or request dicts (mutated)
        client: Configured geocoding client
        delay: Seconds to wait after each provider call
        breaker: Circuit breaker; a fresh one is used if omitted
        sleep: Sleep function, injectable for tests

    Returns:
        BatchResult with success/failed/skipped counts
    """
    logger = get_logger()
    breaker = breaker or CircuitBreaker(failure_threshold=5, expected_exception=GeocodingError)
    result = BatchResult()

    for doc in docs:
        if has_coordinates(doc):
            result.skipped += 1
            continue
        city = doc.get("city")
        if not isinstance(city, str) or not city.strip():
            result.skipped += 1
            continue

        location = doc.get("location") or city
        address = build_address(location, city, client.region)
        try:
            coords = breaker.call(client.lookup, address)
        except CircuitOpenError:
            result.failed += 1
            continue
        except GeocodingError as e:
            logger.warning("Failed to geocode document", address=address, reason=e.reason)
            result.failed += 1
            sleep(delay)
            continue

        if coords is None:
            result.failed += 1
        else:
            doc["latitude"] = coords.latitude
            doc["longitude"] = coords.longitude
            result.success += 1
        sleep(delay)

    logger.info(
        f"Geocoding batch complete: {result.success} geocoded, "
        f"{result.failed} failed, {result.skipped} skipped",
        success=result.success,
        failed=result.failed,
        skipped=result.skipped,
        breaker_state=breaker.state,
    )
    return result
