"""Spherical-earth distance and bearing helpers."""

from __future__ import annotations

import math

from .domain_types import Point2D

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_NM = 1852.0
KNOT_TO_MPS = 0.514444  # 1 knot in metres per second


def distance(a: Point2D, b: Point2D) -> float:
    """Great-circle distance in metres between two WGS84 points (haversine)."""
    rad_lat1, rad_lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlon = math.radians(b.lon - a.lon)
    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(rad_lat1) * math.cos(rad_lat2) * math.sin(dlon / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def distance_nm(a: Point2D, b: Point2D) -> float:
    return distance(a, b) / METERS_PER_NM


def bearing(a: Point2D, b: Point2D) -> float:
    """Initial forward azimuth from ``a`` to ``b`` in degrees within [0, 360).

    Coincident points have no direction; ``0.0`` is returned for them.
    """
    if a == b:
        return 0.0
    rad_lat1, rad_lat2 = math.radians(a.lat), math.radians(b.lat)
    dlon = math.radians(b.lon - a.lon)
    y = math.sin(dlon) * math.cos(rad_lat2)
    x = math.cos(rad_lat1) * math.sin(rad_lat2) - math.sin(rad_lat1) * math.cos(
        rad_lat2
    ) * math.cos(dlon)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


__all__ = [
    "EARTH_RADIUS_M",
    "KNOT_TO_MPS",
    "METERS_PER_NM",
    "bearing",
    "distance",
    "distance_nm",
]
