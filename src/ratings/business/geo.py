"""Distance helpers used for nearby searches and nearby-rater fan-out."""

import math
import re

EARTH_RADIUS_MILES = 3959
KM_PER_DEGREE = 111

_COORDINATE_PATTERNS = (
    re.compile(r"(-?\d+\.?\d*),\s*(-?\d+\.?\d*)"),
    re.compile(r"(-?\d+\.?\d*)\s+(-?\d+\.?\d*)"),
)


def valid_coordinates(latitude, longitude) -> bool:
    if latitude is None or longitude is None:
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def within_radius(lat1, lng1, lat2, lng2, radius_miles: float) -> bool:
    return haversine_miles(lat1, lng1, lat2, lng2) <= radius_miles


def bounding_box(latitude: float, longitude: float, radius_km: float) -> tuple[float, float, float, float]:
    """Approximate ``(min_lat, max_lat, min_lng, max_lng)`` around a point."""
    lat_delta = radius_km / KM_PER_DEGREE
    lng_delta = radius_km / (KM_PER_DEGREE * math.cos(math.radians(latitude)))
    return (
        latitude - lat_delta,
        latitude + lat_delta,
        longitude - lng_delta,
        longitude + lng_delta,
    )


def parse_coordinates(text: str | None) -> tuple[float, float] | None:
    """Pull ``(lat, lng)`` out of strings like "40.71,-74.00" or "40.71 -74.00"."""
    if not text:
        return None
    for pattern in _COORDINATE_PATTERNS:
        match = pattern.search(text)
        if match:
            lat, lng = float(match.group(1)), float(match.group(2))
            if valid_coordinates(lat, lng):
                return lat, lng
    return None
