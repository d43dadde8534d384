from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, pi, sin, sqrt

"""
Geospatial helpers.

Every distance shown by the client (nearby list, map popups, smoke scripts) goes through
`haversine_km` so the numbers never disagree between views.
"""

EARTH_RADIUS_KM = 6371


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def deg2rad(deg: float) -> float:
    return deg * (pi / 180)


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in kilometers between two points.

    Inputs are not validated; a NaN coordinate yields NaN.
    """
    dlat = deg2rad(b.lat - a.lat)
    dlon = deg2rad(b.lon - a.lon)

    h = sin(dlat / 2) ** 2 + cos(deg2rad(a.lat)) * cos(deg2rad(b.lat)) * sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(h), sqrt(1 - h))


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Positional-argument form of `haversine_km`."""
    return haversine_km(GeoPoint(lat=lat1, lon=lon1), GeoPoint(lat=lat2, lon=lon2))
