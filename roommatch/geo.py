"""Great-circle distance and proximity helpers."""

import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0

# Sort boosts for candidates close to the seeker: (max distance km, points)
PROXIMITY_BOOSTS = ((5.0, 50), (10.0, 25))
NEARBY_RADIUS_KM = 10.0


def compute_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine distance in kilometers between two points given in degrees,
    rounded half-up to one decimal place.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Float noise can push a a hair past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    distance = EARTH_RADIUS_KM * c

    return math.floor(distance * 10 + 0.5) / 10


def proximity_boost(distance_km: Optional[float]) -> int:
    if distance_km is None:
        return 0
    for limit, points in PROXIMITY_BOOSTS:
        if distance_km < limit:
            return points
    return 0
