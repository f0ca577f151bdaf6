"""Geographic calculations - Pure functions.

This module provides distance, containment and centroid calculations for
alert areas. All functions are pure with no side effects.
"""

import math
from collections.abc import Sequence


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0

# Fallback match radius by alert class (km)
WATCH_RADIUS_KM = 150.0
WARNING_RADIUS_KM = 75.0
DEFAULT_RADIUS_KM = 100.0


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers
    """
    # Convert to radians
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    # Haversine formula
    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def is_point_in_polygon(
    x: float,
    y: float,
    ring: Sequence[tuple[float, float]],
) -> bool:
    """Check if a point is inside a polygon ring using ray casting.

    Pure function. Coordinates are in the ring's own axis order, so for
    GeoJSON rings pass x=longitude, y=latitude.

    Args:
        x: Point x coordinate (longitude)
        y: Point y coordinate (latitude)
        ring: Polygon vertices as (x, y) pairs

    Returns:
        True if the point is inside (odd number of edge crossings)
    """
    inside = False
    j = len(ring) - 1

    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside

        j = i

    return inside


def polygon_centroid(
    ring: Sequence[tuple[float, float]],
) -> tuple[float, float]:
    """Approximate a polygon's center as the mean of its vertices.

    Pure function. This is a vertex average, not an area centroid; a closed
    ring's repeated first vertex is counted twice.

    Args:
        ring: Polygon vertices as (x, y) pairs (must be non-empty)

    Returns:
        (x, y) of the vertex mean
    """
    sum_x = sum(vertex[0] for vertex in ring)
    sum_y = sum(vertex[1] for vertex in ring)
    return sum_x / len(ring), sum_y / len(ring)


def get_match_radius_km(event_type: str | None) -> float:
    """Get the centroid-distance fallback radius for an alert type.

    Pure function. Watches cover wider areas than warnings.

    Args:
        event_type: NWS event name (e.g., "Tornado Watch")

    Returns:
        Radius in kilometers
    """
    event_lower = (event_type or "").lower()
    if "watch" in event_lower:
        return WATCH_RADIUS_KM
    if "warning" in event_lower:
        return WARNING_RADIUS_KM
    return DEFAULT_RADIUS_KM


def is_within_radius(
    lat: float,
    lon: float,
    center_lat: float,
    center_lon: float,
    radius_km: float,
) -> bool:
    """Check if a point is within a radius of a center point.

    Pure function.
    """
    return calculate_distance(lat, lon, center_lat, center_lon) <= radius_km
