"""Notification preferences - Pure data structures and rules.

Preferences have three distinct states:
- not configured (no document stored): everything is allowed
- configured with quiet hours disabled: everything is allowed
- configured with quiet hours enabled: blocked inside the window
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class QuietHours:
    """Do Not Disturb window, in whole hours of the local day.

    When start_hour > end_hour the window wraps past midnight and covers
    [start_hour, 23] and [0, end_hour]. Both ends are inclusive.

    Attributes:
        enabled: Whether the window is active
        start_hour: First blocked hour (0-23)
        end_hour: Last blocked hour (0-23)
    """
    enabled: bool = False
    start_hour: int = 22
    end_hour: int = 7

    def __post_init__(self) -> None:
        for name in ("start_hour", "end_hour"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 23:
                raise ValueError(f"{name} must be an integer in [0, 23], got {value!r}")

    def blocks(self, hour: int) -> bool:
        """Check if an hour falls inside the window (ignores enabled)."""
        if self.start_hour <= self.end_hour:
            return self.start_hour <= hour <= self.end_hour
        return hour >= self.start_hour or hour <= self.end_hour


@dataclass(frozen=True)
class NotificationPreferences:
    """A user's notification delivery policy.

    Attributes:
        configured: False when the user has never stored preferences
        quiet_hours: Do Not Disturb window
    """
    configured: bool = True
    quiet_hours: QuietHours = field(default_factory=QuietHours)

    @classmethod
    def not_configured(cls) -> "NotificationPreferences":
        """Preferences for a user with no stored document."""
        return cls(configured=False)


def _parse_hour(value: Any, name: str) -> int:
    """Parse an hour value from stored preferences.

    Accepts ints and integral floats/strings (Firestore and JSON clients
    are not always consistent).
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an hour, got {value!r}")
    try:
        hour = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an hour, got {value!r}") from None
    if isinstance(value, float) and value != hour:
        raise ValueError(f"{name} must be a whole hour, got {value!r}")
    return hour


def parse_preferences(data: dict[str, Any] | None) -> NotificationPreferences:
    """Parse a stored preferences document.

    Pure function.

    Args:
        data: Stored document (camelCase keys), or None if absent

    Returns:
        NotificationPreferences

    Raises:
        ValueError: If quiet hours are present but invalid
    """
    if data is None:
        return NotificationPreferences.not_configured()

    dnd = data.get("doNotDisturb")
    if not dnd:
        return NotificationPreferences()

    if not isinstance(dnd, dict):
        raise ValueError(f"doNotDisturb must be an object, got {type(dnd).__name__}")

    defaults = QuietHours()
    return NotificationPreferences(
        quiet_hours=QuietHours(
            enabled=bool(dnd.get("enabled", False)),
            start_hour=_parse_hour(dnd.get("startHour", defaults.start_hour), "startHour"),
            end_hour=_parse_hour(dnd.get("endHour", defaults.end_hour), "endHour"),
        ),
    )


def is_allowed(prefs: NotificationPreferences | None, current_hour: int) -> bool:
    """Decide whether a notification may be sent right now.

    Pure function.

    Args:
        prefs: User preferences (None is treated as not configured)
        current_hour: Local wall-clock hour of the dispatcher (0-23)

    Returns:
        False only if quiet hours are enabled and cover current_hour
    """
    if prefs is None or not prefs.configured:
        return True

    quiet_hours = prefs.quiet_hours
    if not quiet_hours.enabled:
        return True

    return not quiet_hours.blocks(current_hour)
