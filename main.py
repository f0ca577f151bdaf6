"""Cloud Function Entry Point - Root Module.

This is the root-level entry point for Google Cloud Functions.
It imports from the weather_alerts package.
"""

from weather_alerts.main import (
    poll_weather_alerts,
    poll_weather_alerts_pubsub,
)

__all__ = [
    "poll_weather_alerts",
    "poll_weather_alerts_pubsub",
]
