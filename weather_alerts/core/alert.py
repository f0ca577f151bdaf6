"""Weather alert data models and parsing - Pure functions.

This module handles parsing NWS GeoJSON alert features into typed Alert
objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from weather_alerts.core.dedup import sanitize_alert_id


# NWS event names we notify on. Anything else in the feed is dropped.
RELEVANT_ALERT_TYPES = frozenset({
    "Air Quality Alert",
    "Air Stagnation Advisory",
    "Blizzard Warning",
    "Blowing Dust Advisory",
    "Blowing Dust Warning",
    "Brisk Wind Advisory",
    "Cold Weather Advisory",
    "Dense Fog Advisory",
    "Dense Smoke Advisory",
    "Dust Advisory",
    "Dust Storm Warning",
    "Evacuation Immediate",
    "Extreme Heat Warning",
    "Extreme Heat Watch",
    "Extreme Cold Warning",
    "Extreme Cold Watch",
    "Extreme Fire Danger",
    "Extreme Wind Warning",
    "Fire Warning",
    "Fire Weather Watch",
    "Flash Flood Statement",
    "Flash Flood Warning",
    "Flash Flood Watch",
    "Flood Advisory",
    "Flood Statement",
    "Flood Warning",
    "Flood Watch",
    "Freeze Warning",
    "Freeze Watch",
    "Freezing Fog Advisory",
    "Frost Advisory",
    "Heat Advisory",
    "High Wind Warning",
    "High Wind Watch",
    "Ice Storm Warning",
    "Law Enforcement Warning",
    "Local Area Emergency",
    "Red Flag Warning",
    "Severe Thunderstorm Warning",
    "Severe Thunderstorm Watch",
    "Severe Weather Statement",
    "Shelter In Place Warning",
    "Snow Squall Warning",
    "Special Weather Statement",
    "Tornado Warning",
    "Tornado Watch",
    "Wind Advisory",
    "Winter Storm Warning",
    "Winter Storm Watch",
    "Winter Weather Advisory",
})


@dataclass(frozen=True)
class PolygonGeometry:
    """Alert area as a polygon.

    Attributes:
        ring: Outer ring vertices as (lon, lat) pairs
    """
    ring: tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class PointGeometry:
    """Alert area as a single point."""
    lon: float
    lat: float


Geometry = PolygonGeometry | PointGeometry


@dataclass(frozen=True)
class Alert:
    """Immutable weather alert data model.

    Attributes:
        raw_id: Feed-assigned ID (usually a URL)
        storage_key: Sanitized ID, safe as a Firestore document ID
        event_type: NWS event name (e.g., "Tornado Warning")
        severity: NWS severity (e.g., "Extreme", "Severe")
        urgency: NWS urgency (e.g., "Immediate", "Expected")
        area_description: Free-text list of affected areas
        headline: Short display text
        description: Long display text
        geometry: Affected area, or None when the feed omits it
        effective_timestamp: Version marker used for change detection.
            Compared as an opaque string, never parsed.
        expires_at: When the alert stops being relevant (for retention)
        properties: Raw feed properties, persisted alongside the alert
    """
    raw_id: str
    storage_key: str
    event_type: str
    severity: str | None = None
    urgency: str | None = None
    area_description: str | None = None
    headline: str | None = None
    description: str | None = None
    geometry: Geometry | None = None
    effective_timestamp: str | None = None
    expires_at: datetime | None = None
    properties: dict[str, Any] = field(
        default_factory=dict, compare=False, repr=False
    )


def _parse_vertex(value: Any) -> tuple[float, float]:
    """Parse a GeoJSON position into a (lon, lat) tuple.

    Raises:
        ValueError: If the position is not at least two numbers
    """
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        raise ValueError(f"Invalid position: {value!r}")
    lon, lat = value[0], value[1]
    if isinstance(lon, bool) or isinstance(lat, bool):
        raise ValueError(f"Invalid position: {value!r}")
    return float(lon), float(lat)


def parse_geometry(geometry: Any) -> Geometry | None:
    """Parse a GeoJSON geometry into a typed geometry.

    Pure function. Malformed or unsupported geometries return None so that
    matching falls through to the area description.

    Args:
        geometry: GeoJSON geometry dict (or None)

    Returns:
        PolygonGeometry, PointGeometry, or None
    """
    if not isinstance(geometry, dict):
        return None

    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates")

    try:
        if geometry_type == "Polygon":
            if not isinstance(coordinates, list) or not coordinates:
                return None
            ring_data = coordinates[0]
            if not isinstance(ring_data, list) or not ring_data:
                return None
            return PolygonGeometry(
                ring=tuple(_parse_vertex(v) for v in ring_data)
            )

        if geometry_type == "Point":
            lon, lat = _parse_vertex(coordinates)
            return PointGeometry(lon=lon, lat=lat)

    except (TypeError, ValueError):
        return None

    return None


def get_effective_timestamp(properties: dict[str, Any]) -> str | None:
    """Get the alert's version marker.

    First non-empty value of "updated", "effective", "sent".

    Pure function.
    """
    for key in ("updated", "effective", "sent"):
        value = properties.get(key)
        if value:
            return str(value)
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Pure function. Naive timestamps are assumed to be UTC.

    Returns:
        Parsed datetime, or None if missing or unparseable
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_alert(feature: dict[str, Any]) -> Alert | None:
    """Parse a single GeoJSON feature into an Alert.

    Pure function: takes raw dict, returns typed Alert or None if invalid.

    Args:
        feature: GeoJSON feature dict from the NWS API

    Returns:
        Alert object or None if the feature lacks an ID or event type
    """
    if not isinstance(feature, dict):
        return None

    props = feature.get("properties") or {}
    if not isinstance(props, dict):
        return None

    raw_id = feature.get("id") or props.get("id")
    event_type = props.get("event")
    if not raw_id or not event_type:
        return None

    # "ends" is when the hazard is over; "expires" is when this message lapses
    expires_at = parse_timestamp(props.get("ends")) or parse_timestamp(
        props.get("expires")
    )

    return Alert(
        raw_id=str(raw_id),
        storage_key=sanitize_alert_id(str(raw_id)),
        event_type=str(event_type),
        severity=props.get("severity"),
        urgency=props.get("urgency"),
        area_description=props.get("areaDesc"),
        headline=props.get("headline"),
        description=props.get("description"),
        geometry=parse_geometry(feature.get("geometry")),
        effective_timestamp=get_effective_timestamp(props),
        expires_at=expires_at,
        properties=dict(props),
    )


def is_relevant(alert: Alert) -> bool:
    """Check if an alert's event type is on the allow-list.

    Pure function.
    """
    return alert.event_type in RELEVANT_ALERT_TYPES


def parse_alerts(geojson: dict[str, Any]) -> list[Alert]:
    """Parse an NWS FeatureCollection into relevant Alerts.

    Pure function: drops invalid features and non-allow-listed event types,
    preserving feed order.

    Args:
        geojson: Full GeoJSON FeatureCollection from the NWS API

    Returns:
        List of valid, relevant Alert objects
    """
    alerts = []

    for feature in geojson.get("features", []):
        alert = parse_alert(feature)
        if alert is not None and is_relevant(alert):
            alerts.append(alert)

    return alerts
