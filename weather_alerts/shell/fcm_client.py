"""Firebase Cloud Messaging Client - Imperative Shell.

This module handles delivering push notifications via FCM.
All I/O is contained here; message formatting is in the core module.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any

import firebase_admin
from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError


logger = logging.getLogger(__name__)


# Name of the Firebase app instance owned by this client
DEFAULT_APP_NAME = "weather-alerts"


@dataclass
class PushResponse:
    """Response from a push delivery attempt.

    Attributes:
        success: Whether the message was accepted by FCM
        message_id: FCM message ID if successful
        error: Error message if failed
    """
    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass
class FCMConfig:
    """Configuration for FCM client.

    Attributes:
        project_id: Firebase project ID (None for default credentials' project)
        app_name: Firebase app name
        dry_run: Validate messages without delivering them
    """
    project_id: str | None = None
    app_name: str = DEFAULT_APP_NAME
    dry_run: bool = False


def to_fcm_message(message: dict[str, Any]) -> messaging.Message:
    """Convert a formatter message dict into an FCM Message."""
    android = message.get("android", {})
    android_notification = android.get("notification", {})
    apns = message.get("apns", {})

    return messaging.Message(
        token=message["token"],
        notification=messaging.Notification(
            title=message["notification"]["title"],
            body=message["notification"]["body"],
        ),
        data=message.get("data"),
        android=messaging.AndroidConfig(
            priority=android.get("priority"),
            notification=messaging.AndroidNotification(
                channel_id=android_notification.get("channel_id"),
                priority=android_notification.get("priority"),
                default_sound=android_notification.get("default_sound"),
                default_vibrate_timings=android_notification.get("default_vibrate_timings"),
            ),
        ),
        apns=messaging.APNSConfig(
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    sound=apns.get("sound"),
                    badge=apns.get("badge"),
                ),
            ),
        ),
    )


class FCMClient:
    """Client for sending push notifications via Firebase Cloud Messaging.

    This is part of the imperative shell - it handles I/O.
    """

    def __init__(self, config: FCMConfig | None = None) -> None:
        """Initialize FCM client.

        Args:
            config: FCM configuration
        """
        self.config = config or FCMConfig()
        self._app: firebase_admin.App | None = None
        self._app_lock = threading.Lock()

    @property
    def app(self) -> firebase_admin.App:
        """Lazy initialization of the Firebase app.

        send() is called from worker threads, so creation is serialized.
        """
        if self._app is None:
            with self._app_lock:
                if self._app is None:
                    self._app = self._get_or_create_app()
        return self._app

    def _get_or_create_app(self) -> firebase_admin.App:
        try:
            return firebase_admin.get_app(self.config.app_name)
        except ValueError:
            pass

        options = None
        if self.config.project_id:
            options = {"projectId": self.config.project_id}
        return firebase_admin.initialize_app(
            options=options,
            name=self.config.app_name,
        )

    def send(self, message: dict[str, Any]) -> PushResponse:
        """Send a push notification to a single device.

        This method performs network I/O. Failures are returned, not raised.

        Args:
            message: Message dict from the formatter

        Returns:
            PushResponse indicating success or failure
        """
        try:
            app = self.app
        except (ValueError, FirebaseError) as e:
            logger.error("Firebase app initialization failed: %s", str(e))
            return PushResponse(
                success=False,
                error=f"Firebase app unavailable: {e}",
            )

        try:
            message_id = messaging.send(
                to_fcm_message(message),
                dry_run=self.config.dry_run,
                app=app,
            )

            logger.info("Push notification sent: %s", message_id)
            return PushResponse(
                success=True,
                message_id=message_id,
            )

        except FirebaseError as e:
            logger.error("FCM error (%s): %s", e.code, str(e))
            return PushResponse(
                success=False,
                error=f"FCM error: {e.code}: {e}",
            )
        except (ValueError, KeyError) as e:
            logger.error("Invalid push message: %s", str(e))
            return PushResponse(
                success=False,
                error=f"Invalid message: {e}",
            )
