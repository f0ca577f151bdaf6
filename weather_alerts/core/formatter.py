"""Message formatting - Pure functions.

This module formats alerts into push notification payloads and builds
the notification history records stored after delivery.
All functions are pure with no side effects.
"""

from datetime import datetime
from typing import Any

from weather_alerts.core.alert import Alert


DEFAULT_BODY = "Weather alert in your area"
CLICK_ACTION = "FLUTTER_NOTIFICATION_CLICK"
ANDROID_CHANNEL_ID = "weather_alerts"


def get_notification_body(alert: Alert) -> str:
    """Pick the notification body text.

    Pure function. Headline, then description, then a generic message.
    """
    return alert.headline or alert.description or DEFAULT_BODY


def format_alert_summary(alert: Alert) -> str:
    """Format a one-line summary of an alert for logs.

    Pure function.
    """
    return f"{alert.event_type} for {alert.area_description or 'unknown area'} ({alert.storage_key})"


def build_push_message(alert: Alert, token: str) -> dict[str, Any]:
    """Build a push notification message for one device.

    Pure function. Data values are all strings, as FCM requires.

    Args:
        alert: The alert to notify about
        token: Device registration token

    Returns:
        Message dict with token, notification, data, android and apns keys
    """
    return {
        "token": token,
        "notification": {
            "title": alert.event_type,
            "body": get_notification_body(alert),
        },
        "data": {
            "alertId": alert.raw_id,
            "alertType": alert.event_type,
            "areaDesc": alert.area_description or "",
            "severity": alert.severity or "",
            "urgency": alert.urgency or "",
            "clickAction": CLICK_ACTION,
        },
        "android": {
            "priority": "high",
            "notification": {
                "channel_id": ANDROID_CHANNEL_ID,
                "priority": "high",
                "default_sound": True,
                "default_vibrate_timings": True,
            },
        },
        "apns": {
            "sound": "default",
            "badge": 1,
        },
    }


def build_notification_record(
    alert: Alert,
    token: str,
    response: str | None,
    sent_at: datetime,
) -> dict[str, Any]:
    """Build the history record stored after a successful delivery.

    Pure function.

    Args:
        alert: The alert that was sent
        token: Device token the message was delivered to
        response: Raw delivery service response (message ID)
        sent_at: Send timestamp

    Returns:
        Record dict (camelCase keys, as read by the mobile client)
    """
    return {
        "alertId": alert.raw_id,
        "event": alert.event_type,
        "areaDesc": alert.area_description,
        "sentAt": sent_at,
        "read": False,
        "notifiedDevices": [token],
        "fcmResponse": response,
    }


def build_alert_document(alert: Alert, fetched_at: datetime) -> dict[str, Any]:
    """Build the stored alert document.

    Pure function. Raw feed properties plus bookkeeping fields.
    """
    return {
        **alert.properties,
        "alertId": alert.storage_key,
        "originalAlertId": alert.raw_id,
        "lastUpdated": alert.effective_timestamp,
        "expiresAt": alert.expires_at,
        "fetchedAt": fetched_at,
    }
