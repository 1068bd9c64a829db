#Purpose: Straight-line distance math for pricing and driver ranking.
#Haversine great-circle distance, corrected by a fixed road factor because
#real roads aren't straight lines.
#No HTTP calls here; this is the offline counterpart of a routing engine.

import math
from typing import Tuple

#internal coordinate type :(lat,lng)
LatLng = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0
ROAD_FACTOR = 1.3


def validate_coordinates(coords: LatLng) -> None:
    """Raise ValueError unless coords is a finite (lat, lng) pair in range."""
    lat, lng = coords
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValueError(f"Coordinates must be finite, got {coords}")
    if not -90.0 <= lat <= 90.0:
        raise ValueError(f"Latitude out of range: {lat}")
    if not -180.0 <= lng <= 180.0:
        raise ValueError(f"Longitude out of range: {lng}")


def haversine_km(a: LatLng, b: LatLng) -> float:
    """
    Great-circle distance between two (lat, lng) points in kilometers.
    """
    lat1, lng1 = a
    lat2, lng2 = b

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def distance_km(a: LatLng, b: LatLng) -> float:
    """
    Approximate road distance in kilometers, rounded to one decimal.

    Computed as haversine distance * ROAD_FACTOR. Symmetric, and zero for
    identical points.
    """
    validate_coordinates(a)
    validate_coordinates(b)
    return round(haversine_km(a, b) * ROAD_FACTOR, 1)
