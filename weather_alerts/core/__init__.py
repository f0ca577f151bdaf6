"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Alert parsing and allow-list filtering
- Change detection (ID sanitizing, timestamp diff)
- Geo calculations and geofence matching
- Quiet-hours preference rules
- Push message and history record formatting
- Retention rules

All functions here are deterministic and have no I/O.
"""

from weather_alerts.core.alert import Alert, parse_alert, parse_alerts
from weather_alerts.core.dedup import sanitize_alert_id, should_process
from weather_alerts.core.geo import calculate_distance, is_point_in_polygon
from weather_alerts.core.geofence import MatchResult, matches
from weather_alerts.core.preferences import (
    NotificationPreferences,
    QuietHours,
    is_allowed,
    parse_preferences,
)
from weather_alerts.core.formatter import build_push_message, build_notification_record
from weather_alerts.core.retention import is_expired, retention_cutoff

__all__ = [
    # Alert
    "Alert",
    "parse_alert",
    "parse_alerts",
    # Dedup
    "sanitize_alert_id",
    "should_process",
    # Geo
    "calculate_distance",
    "is_point_in_polygon",
    # Geofence
    "MatchResult",
    "matches",
    # Preferences
    "NotificationPreferences",
    "QuietHours",
    "is_allowed",
    "parse_preferences",
    # Formatter
    "build_push_message",
    "build_notification_record",
    # Retention
    "is_expired",
    "retention_cutoff",
]
