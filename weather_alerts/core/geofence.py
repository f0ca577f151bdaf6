"""Geofence matching - Pure functions.

Decides whether a user's location falls inside an alert's affected area.
Matching is an ordered list of strategies. Each strategy returns a
three-valued MatchResult; the first strategy that is applicable decides.

    1. polygon_containment - user inside the alert polygon
    2. centroid_radius     - user near the alert's center point
    3. area_description    - user's county named in the area text

All functions are pure with no side effects.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from weather_alerts.core.alert import Geometry, PolygonGeometry
from weather_alerts.core.gazetteer import area_mentions_any, find_nearest_locality
from weather_alerts.core.geo import (
    get_match_radius_km,
    is_point_in_polygon,
    is_within_radius,
    polygon_centroid,
)


class MatchResult(Enum):
    """Outcome of a single matching strategy."""
    MATCHED = "matched"
    NOT_MATCHED = "not_matched"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class MatchRequest:
    """Inputs to a geofence check.

    Attributes:
        user_lat: User latitude
        user_lon: User longitude
        geometry: Alert geometry (None if absent or malformed)
        event_type: NWS event name, used to pick the fallback radius
        area_description: Free-text area list from the alert
    """
    user_lat: float
    user_lon: float
    geometry: Geometry | None
    event_type: str | None
    area_description: str | None


MatchStrategy = Callable[[MatchRequest], MatchResult]


def polygon_containment(request: MatchRequest) -> MatchResult:
    """Match if the user is inside the alert polygon.

    A user outside the polygon is NOT_APPLICABLE rather than NOT_MATCHED,
    so the radius fallback still gets a say.
    """
    if not isinstance(request.geometry, PolygonGeometry):
        return MatchResult.NOT_APPLICABLE

    if is_point_in_polygon(request.user_lon, request.user_lat, request.geometry.ring):
        return MatchResult.MATCHED

    return MatchResult.NOT_APPLICABLE


def get_geometry_center(geometry: Geometry) -> tuple[float, float]:
    """Get (lat, lon) of a geometry's center.

    Pure function.
    """
    if isinstance(geometry, PolygonGeometry):
        lon, lat = polygon_centroid(geometry.ring)
        return lat, lon
    return geometry.lat, geometry.lon


def centroid_radius(request: MatchRequest) -> MatchResult:
    """Match if the user is within the event type's radius of the center."""
    if request.geometry is None:
        return MatchResult.NOT_APPLICABLE

    center_lat, center_lon = get_geometry_center(request.geometry)
    radius_km = get_match_radius_km(request.event_type)

    if is_within_radius(
        request.user_lat, request.user_lon, center_lat, center_lon, radius_km
    ):
        return MatchResult.MATCHED
    return MatchResult.NOT_MATCHED


def area_description(request: MatchRequest) -> MatchResult:
    """Match if the user's nearest locality's county is in the area text.

    Only used for alerts without geometry.
    """
    if request.geometry is not None or not request.area_description:
        return MatchResult.NOT_APPLICABLE

    nearest = find_nearest_locality(request.user_lat, request.user_lon)
    if nearest is None:
        return MatchResult.NOT_MATCHED

    locality, _ = nearest
    if area_mentions_any(request.area_description, locality.counties):
        return MatchResult.MATCHED
    return MatchResult.NOT_MATCHED


DEFAULT_STRATEGIES: tuple[MatchStrategy, ...] = (
    polygon_containment,
    centroid_radius,
    area_description,
)


def evaluate(
    request: MatchRequest,
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
) -> tuple[MatchResult, str | None]:
    """Run strategies in order until one is applicable.

    Pure function.

    Returns:
        (result, name of the deciding strategy or None)
    """
    for strategy in strategies:
        result = strategy(request)
        if result is not MatchResult.NOT_APPLICABLE:
            return result, strategy.__name__
    return MatchResult.NOT_APPLICABLE, None


def matches(
    user_lat: float,
    user_lon: float,
    geometry: Geometry | None,
    event_type: str | None,
    area_desc: str | None,
) -> bool:
    """Check if a user location is inside an alert's affected area.

    Pure function.

    Args:
        user_lat: User latitude
        user_lon: User longitude
        geometry: Alert geometry (None if absent)
        event_type: NWS event name
        area_desc: Alert area description

    Returns:
        True if the user should be notified about this alert
    """
    result, _ = evaluate(MatchRequest(
        user_lat=user_lat,
        user_lon=user_lon,
        geometry=geometry,
        event_type=event_type,
        area_description=area_desc,
    ))
    return result is MatchResult.MATCHED
