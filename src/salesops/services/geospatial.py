"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Optional

from shapely.geometry import Point

EARTH_RADIUS_KM = 6371.0
NULL_ISLAND_TOLERANCE_DEG = 0.0001


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def planar_degree_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Euclidean distance in raw degree space.

    Much cheaper than haversine and only meaningful at building scale, where
    it is used for co-location checks.
    """

    return Point(lon1, lat1).distance(Point(lon2, lat2))


def is_valid_coordinate(lat: Optional[float], lon: Optional[float]) -> bool:
    """Return True for finite coordinates away from the (0, 0) placeholder."""

    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon) or math.isinf(lat) or math.isinf(lon):
        return False
    return abs(lat) > NULL_ISLAND_TOLERANCE_DEG and abs(lon) > NULL_ISLAND_TOLERANCE_DEG


def has_coordinates(lat: Optional[float], lon: Optional[float]) -> bool:
    """Looser check used by the cleaning engine: present and non-zero."""

    if lat is None or lon is None:
        return False
    if math.isnan(lat) or math.isnan(lon):
        return False
    return lat != 0 and lon != 0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity, matching the dashboard's rounding."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))
