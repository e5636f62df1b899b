"""
distance.py – Great-circle distance between pickup and destination points.

Used to estimate how far a load travels so transport emissions can be
charged to a record. Invalid coordinates never raise; they collapse to a
zero (or fallback) distance.
"""
from __future__ import annotations

import math
from typing import Any

from wastebank_impact.constants import EARTH_RADIUS_KM


def _is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def haversine_distance_km(lat1: Any, lon1: Any, lat2: Any, lon2: Any) -> float:
    """
    Compute great-circle distance between two lat/lon pairs in kilometres.

    Returns 0.0 when any of the four inputs is not a finite number.
    """
    if not all(_is_finite_number(v) for v in (lat1, lon1, lat2, lon2)):
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2.0) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def record_distance_km(record: Any, fallback_km: float = 0.0) -> float:
    """
    Return the distance (km) a record's load travelled.

    Resolution order:
    1. an explicit ``distance_km`` on the record,
    2. haversine between ``coordinates`` and ``destination_coordinates``,
    3. *fallback_km* when either point is missing or invalid.
    """
    explicit = getattr(record, "distance_km", None)
    if _is_finite_number(explicit) and explicit >= 0:
        return float(explicit)

    origin = getattr(record, "coordinates", None)
    destination = getattr(record, "destination_coordinates", None)
    if origin is None or destination is None:
        return fallback_km

    points = (origin.lat, origin.lng, destination.lat, destination.lng)
    if not all(_is_finite_number(v) for v in points):
        return fallback_km
    return haversine_distance_km(*points)
