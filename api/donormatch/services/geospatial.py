from __future__ import annotations

import math

from donormatch.core.errors import InvalidCoordinate
from donormatch.schemas.candidates import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    lat1_rad, lat2_rad = math.radians(lat1), math.radians(lat2)

    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    # Clamp due to floating-point drift so we never take sqrt of a negative.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def validate_coordinate(latitude: float, longitude: float) -> Coordinate:
    """Build a Coordinate from raw degrees, raising InvalidCoordinate on bad input."""
    for value in (latitude, longitude):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidCoordinate(latitude, longitude, "latitude and longitude must be numbers")
        if not math.isfinite(value):
            raise InvalidCoordinate(latitude, longitude, "latitude and longitude must be finite")
    if not -90 <= latitude <= 90:
        raise InvalidCoordinate(latitude, longitude, "latitude must be within -90 to 90")
    if not -180 <= longitude <= 180:
        raise InvalidCoordinate(latitude, longitude, "longitude must be within -180 to 180")
    return Coordinate(latitude=latitude, longitude=longitude)


__all__ = ["EARTH_RADIUS_KM", "haversine_distance", "distance_km", "validate_coordinate"]
