"""Change detection logic - Pure functions.

This module decides which alerts are new or updated and need to be
processed. All functions are pure with no side effects.

Note: The actual lookup of stored alerts is handled by the imperative
shell (Firestore client). This module only contains the pure logic.
"""

import re


_PROTOCOL_AND_HOST = re.compile(r"^https?://[^/]+/")
_INVALID_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_alert_id(alert_id: str) -> str:
    """Convert a feed alert ID into a Firestore-safe document ID.

    Pure function. Idempotent: sanitizing a sanitized ID is a no-op.

    Example:
        "https://api.weather.gov/alerts/urn:oid:2.49.0.1.840.0.abc"
        -> "alerts_urn_oid_2_49_0_1_840_0_abc"

    Args:
        alert_id: Raw alert ID from the feed

    Returns:
        ID containing only [A-Za-z0-9_-]
    """
    key = _PROTOCOL_AND_HOST.sub("", alert_id)
    key = key.replace("/", "_")
    return _INVALID_KEY_CHARS.sub("_", key)


def should_process(
    exists: bool,
    stored_timestamp: str | None,
    incoming_timestamp: str | None,
) -> bool:
    """Decide whether an alert is new or updated.

    Pure function. Equality-based, not ordering-based: any change in the
    effective timestamp triggers reprocessing, and an unchanged timestamp
    never does.

    Args:
        exists: Whether a stored record exists for the alert's key
        stored_timestamp: Effective timestamp of the stored record
        incoming_timestamp: Effective timestamp from the feed

    Returns:
        True if the alert should be stored and notified
    """
    if not exists:
        return True
    return stored_timestamp != incoming_timestamp
