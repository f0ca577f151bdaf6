"""User location context - Pure data structures.

A user's last reported position, as stored on the user document under
"currentLocation".
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


@dataclass(frozen=True)
class UserLocationContext:
    """Last known position of a user.

    Attributes:
        user_id: User document ID
        lat: Latitude
        lon: Longitude
        is_using_location: True if from device GPS, False if a chosen city
        selected_city: City the user picked manually (optional)
        updated_at: When the client last reported this position
    """
    user_id: str
    lat: float
    lon: float
    is_using_location: bool = False
    selected_city: str | None = None
    updated_at: datetime | None = None


def _coerce_datetime(value: Any) -> datetime | None:
    """Convert a stored timestamp into an aware datetime.

    Firestore returns datetimes; older documents written via REST may carry
    {"_seconds": ...} dicts or ISO strings.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, dict) and "_seconds" in value:
        return datetime.fromtimestamp(value["_seconds"], tz=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def parse_location(user_id: str, data: Any) -> UserLocationContext | None:
    """Parse a stored "currentLocation" map.

    Pure function.

    Returns:
        UserLocationContext, or None if lat/lon are missing or invalid
    """
    if not isinstance(data, dict):
        return None

    try:
        lat = float(data["lat"])
        lon = float(data["lon"])
    except (KeyError, TypeError, ValueError):
        return None

    return UserLocationContext(
        user_id=user_id,
        lat=lat,
        lon=lon,
        is_using_location=bool(data.get("isUsingLocation", False)),
        selected_city=data.get("selectedCity"),
        updated_at=_coerce_datetime(data.get("updatedAt")),
    )


def location_age_hours(location: UserLocationContext, now: datetime) -> float | None:
    """Hours since the location was last reported, or None if unknown.

    Pure function.
    """
    if location.updated_at is None:
        return None
    return (now - location.updated_at) / timedelta(hours=1)


def is_stale(
    location: UserLocationContext,
    now: datetime,
    max_age_hours: float = 24,
) -> bool:
    """Check if a location is older than max_age_hours.

    Pure function. Unknown age is not considered stale.
    """
    age = location_age_hours(location, now)
    return age is not None and age > max_age_hours
