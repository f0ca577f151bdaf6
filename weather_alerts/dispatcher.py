"""Notification Dispatcher - Sends one alert to one user.

Formats the push message (pure core), sends it through the push client
(shell) and records the delivery in the user's notification history.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from weather_alerts.core.alert import Alert
from weather_alerts.core.formatter import build_notification_record, build_push_message
from weather_alerts.shell.fcm_client import FCMClient
from weather_alerts.shell.firestore_client import FirestoreClient


logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Result of notifying one user about one alert.

    Attributes:
        alert: The alert that was processed
        user_id: Recipient user ID
        success: Whether the push was delivered
        skipped: True if nothing was attempted (no token, quiet hours, ...)
        reason: Why the user was skipped
        message_id: Delivery service message ID if successful
        error: Error message if failed
    """
    alert: Alert
    user_id: str
    success: bool
    skipped: bool = False
    reason: str | None = None
    message_id: str | None = None
    error: str | None = None


def skipped(alert: Alert, user_id: str, reason: str) -> DispatchResult:
    """Build a result for a user who was deliberately not notified."""
    return DispatchResult(
        alert=alert,
        user_id=user_id,
        success=False,
        skipped=True,
        reason=reason,
    )


class NotificationDispatcher:
    """Delivers push notifications and records history."""

    def __init__(
        self,
        push_client: FCMClient,
        store: FirestoreClient,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            push_client: Push delivery client
            store: Store for notification history
            clock: Returns the current time (defaults to UTC now)
        """
        self.push_client = push_client
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def dispatch(
        self,
        alert: Alert,
        user_id: str,
        token: str | None,
    ) -> DispatchResult:
        """Send an alert notification to a user's device.

        A missing token is not an error: not every user has registered a
        device. A history write failure is logged but the delivery still
        counts as sent. The history record is stamped when the push is
        accepted, not when the run started.

        Args:
            alert: Alert to notify about
            user_id: Recipient user ID
            token: Recipient's push token

        Returns:
            DispatchResult for this user
        """
        if not token:
            logger.info("No push token for user %s, skipping", user_id)
            return skipped(alert, user_id, "no push token")

        message = build_push_message(alert, token)
        response = self.push_client.send(message)

        if not response.success:
            logger.error(
                "Failed to notify user %s about %s: %s",
                user_id,
                alert.storage_key,
                response.error,
            )
            return DispatchResult(
                alert=alert,
                user_id=user_id,
                success=False,
                error=response.error,
            )

        record = build_notification_record(
            alert,
            token,
            response.message_id,
            self.clock(),
        )
        try:
            self.store.add_notification_record(user_id, record)
        except Exception:
            logger.exception(
                "Notified user %s but failed to store history for %s",
                user_id,
                alert.storage_key,
            )

        logger.info(
            "Notified user %s: %s",
            user_id,
            alert.event_type,
        )

        return DispatchResult(
            alert=alert,
            user_id=user_id,
            success=True,
            message_id=response.message_id,
        )
