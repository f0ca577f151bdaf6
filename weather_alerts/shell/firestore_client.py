"""Firestore Client - Imperative Shell.

This module handles persistence of alerts, user locations, device tokens,
notification preferences and notification history. Uses Google Cloud
Firestore.

All I/O is contained here; change detection and matching logic are in the
core module. Errors propagate to the caller, which decides whether they
are fatal for an alert, a user, or a request.

Layout:
    nws_alerts/{storage_key}                    alert documents
    users/{user_id}                             currentLocation, fcmToken
    users/{user_id}/preferences/main            notification preferences
    users/{user_id}/notification_history/{id}   delivery records
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from weather_alerts.core.location import UserLocationContext, parse_location


logger = logging.getLogger(__name__)


# Default collection names
DEFAULT_ALERTS_COLLECTION = "nws_alerts"
DEFAULT_USERS_COLLECTION = "users"

PREFERENCES_COLLECTION = "preferences"
PREFERENCES_DOCUMENT = "main"
HISTORY_COLLECTION = "notification_history"

# Most recent records returned by get_notification_history
DEFAULT_HISTORY_LIMIT = 50


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        alerts_collection: Collection for alert documents
        users_collection: Collection for user documents
    """
    project_id: str | None = None
    database: str | None = None
    alerts_collection: str = DEFAULT_ALERTS_COLLECTION
    users_collection: str = DEFAULT_USERS_COLLECTION


@dataclass
class UserRecord:
    """A registered user as seen by the notification pipeline.

    Attributes:
        user_id: User document ID
        location: Last known location (None if never reported or invalid)
        fcm_token: Push delivery token (None if no device registered)
    """
    user_id: str
    location: UserLocationContext | None
    fcm_token: str | None


class FirestoreClient:
    """Client for the alert and user store in Firestore.

    This is part of the imperative shell - it handles database I/O.
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore client.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _alerts(self) -> Any:
        return self.client.collection(self.config.alerts_collection)

    def _user_ref(self, user_id: str) -> Any:
        return self.client.collection(self.config.users_collection).document(user_id)

    def _preferences_ref(self, user_id: str) -> Any:
        return (
            self._user_ref(user_id)
            .collection(PREFERENCES_COLLECTION)
            .document(PREFERENCES_DOCUMENT)
        )

    # ----- Alerts -----

    def get_alert_timestamp(self, storage_key: str) -> tuple[bool, str | None]:
        """Look up the stored effective timestamp of an alert.

        This method performs database I/O.

        Args:
            storage_key: Sanitized alert ID

        Returns:
            (exists, lastUpdated) - lastUpdated is None when not stored
        """
        doc = self._alerts().document(storage_key).get()

        if not doc.exists:
            return False, None

        data = doc.to_dict() or {}
        return True, data.get("lastUpdated")

    def save_alert(self, storage_key: str, document: dict[str, Any]) -> None:
        """Create or overwrite an alert document.

        Args:
            storage_key: Sanitized alert ID
            document: Full alert document
        """
        self._alerts().document(storage_key).set(document)
        logger.debug("Stored alert %s", storage_key)

    def find_expired_alerts(self, cutoff: datetime) -> list[tuple[str, datetime | None]]:
        """Find alerts whose expiry is before a cutoff.

        Args:
            cutoff: Alerts with expiresAt < cutoff are returned

        Returns:
            (storage_key, expiresAt) for each expired alert
        """
        query = self._alerts().where(filter=FieldFilter("expiresAt", "<", cutoff))
        return [
            (doc.id, (doc.to_dict() or {}).get("expiresAt"))
            for doc in query.stream()
        ]

    def delete_alert(self, storage_key: str) -> None:
        """Delete a single alert document."""
        self._alerts().document(storage_key).delete()

    # ----- Users -----

    def list_users(self) -> list[UserRecord]:
        """Fetch all registered users with their location and token.

        This method performs database I/O.

        Returns:
            List of users (including ones without location or token)
        """
        users = []

        for doc in self.client.collection(self.config.users_collection).stream():
            data = doc.to_dict() or {}
            users.append(UserRecord(
                user_id=doc.id,
                location=parse_location(doc.id, data.get("currentLocation")),
                fcm_token=data.get("fcmToken") or None,
            ))

        logger.info("Fetched %d users from Firestore", len(users))
        return users

    def save_location(self, user_id: str, location: dict[str, Any]) -> None:
        """Record a user's latest position.

        Args:
            user_id: User document ID
            location: Client payload with lat, lon, isUsingLocation, selectedCity
        """
        self._user_ref(user_id).set(
            {
                "currentLocation": {
                    "lat": location.get("lat"),
                    "lon": location.get("lon"),
                    "isUsingLocation": location.get("isUsingLocation"),
                    "selectedCity": location.get("selectedCity"),
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                },
            },
            merge=True,
        )

    def save_fcm_token(self, user_id: str, token: str) -> None:
        """Register a user's push delivery token."""
        self._user_ref(user_id).set(
            {
                "fcmToken": token,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            },
            merge=True,
        )

    # ----- Preferences -----

    def get_preferences(self, user_id: str) -> dict[str, Any] | None:
        """Fetch a user's stored preferences document.

        Returns:
            Preferences dict, or None if the user never stored any
        """
        doc = self._preferences_ref(user_id).get()
        if not doc.exists:
            return None
        return doc.to_dict()

    def save_preferences(self, user_id: str, preferences: dict[str, Any]) -> None:
        """Replace a user's preferences document."""
        self._preferences_ref(user_id).set({
            **preferences,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        })

    # ----- Notification history -----

    def add_notification_record(self, user_id: str, record: dict[str, Any]) -> str:
        """Append a delivery record to a user's history.

        Returns:
            ID of the new history document
        """
        _, doc_ref = self._user_ref(user_id).collection(HISTORY_COLLECTION).add(record)
        return doc_ref.id

    def get_notification_history(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[dict[str, Any]]:
        """Fetch a user's most recent delivery records, newest first.

        Returns:
            Records, each including its document "id"
        """
        query = (
            self._user_ref(user_id)
            .collection(HISTORY_COLLECTION)
            .order_by("sentAt", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        return [{"id": doc.id, **(doc.to_dict() or {})} for doc in query.stream()]
