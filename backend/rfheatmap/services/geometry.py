"""Geodesic and planar geometry helpers for the propagation engine.

All coordinates are WGS84 degrees. Segment tests treat (lat, lng) as a flat
plane, which is accurate enough at floor-plan scale.
"""

import math
from typing import Tuple

EARTH_RADIUS_METERS = 6371000.0

LatLng = Tuple[float, float]


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Great-circle distance between two points.

    Args:
        lat1, lng1: First point in degrees
        lat2, lng2: Second point in degrees

    Returns:
        Distance in meters
    """
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2 +
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
        math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def calculate_bearing(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compass bearing from point 1 to point 2 in degrees, in [0, 360)."""
    d_lng = math.radians(lng2 - lng1)
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    x = math.sin(d_lng) * math.cos(lat2_rad)
    y = (
        math.cos(lat1_rad) * math.sin(lat2_rad) -
        math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(d_lng)
    )

    bearing = (math.degrees(math.atan2(x, y)) + 360) % 360
    # (-tiny + 360) % 360 rounds to 360.0 in floating point
    return 0.0 if bearing >= 360 else bearing


def _cross_product(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    return (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)


def segments_intersect(a1: LatLng, a2: LatLng, b1: LatLng, b2: LatLng) -> bool:
    """
    Test whether segment a1-a2 properly crosses segment b1-b2.

    Uses the signs of four cross products. Collinear, touching and
    endpoint-only contacts are not crossings.
    """
    d1 = _cross_product(b1[0], b1[1], b2[0], b2[1], a1[0], a1[1])
    d2 = _cross_product(b1[0], b1[1], b2[0], b2[1], a2[0], a2[1])
    d3 = _cross_product(a1[0], a1[1], a2[0], a2[1], b1[0], b1[1])
    d4 = _cross_product(a1[0], a1[1], a2[0], a2[1], b2[0], b2[1])

    return (
        ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and
        ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0))
    )
