"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- NWS alerts API client (HTTP)
- Firestore client (database)
- Firebase Cloud Messaging client (push)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from weather_alerts.shell.nws_client import NWSClient, FeedError
from weather_alerts.shell.firestore_client import FirestoreClient, UserRecord
from weather_alerts.shell.fcm_client import FCMClient, PushResponse
from weather_alerts.shell.config_loader import load_config, Config

__all__ = [
    "NWSClient",
    "FeedError",
    "FirestoreClient",
    "UserRecord",
    "FCMClient",
    "PushResponse",
    "load_config",
    "Config",
]
