"""Great-circle helpers for coastline distance."""

from math import asin, cos, radians, sin, sqrt

from scopeperth.core.constants import EARTH_RADIUS_KM


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    dlat = radians(lat2 - lat1)
    dlng = radians(lng2 - lng1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * asin(sqrt(a))


def distance_to_meridian_km(lat: float, lng: float, meridian_lng: float) -> float:
    """Distance from a point to a north-south line, measured along its latitude."""
    return haversine_km(lat, lng, lat, meridian_lng)
