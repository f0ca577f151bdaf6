"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration, builds the shell clients
once per process and invokes the orchestrator.

The orchestrator is built on the first invocation rather than at import.
A bad configuration then surfaces as a 400 response from that invocation
instead of an import failure that takes the whole instance down, and a
failed build is retried on the next invocation.
"""

import logging
import os
import json
from typing import Any

import functions_framework
from flask import Request

from weather_alerts.core.config import Config, validate_config
from weather_alerts.dispatcher import NotificationDispatcher
from weather_alerts.orchestrator import Orchestrator
from weather_alerts.shell.config_loader import load_config, load_config_from_env
from weather_alerts.shell.fcm_client import FCMClient, FCMConfig
from weather_alerts.shell.firestore_client import FirestoreClient, FirestoreConfig
from weather_alerts.shell.nws_client import NWSClient


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# Built on first invocation and reused while the instance stays warm
_orchestrator: Orchestrator | None = None


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("NWS_AREA"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def build_orchestrator(config: Config) -> Orchestrator:
    """Construct the shell clients and wire them into an orchestrator."""
    store = FirestoreClient(
        FirestoreConfig(
            database=config.firestore_database,
            alerts_collection=config.alerts_collection,
            users_collection=config.users_collection,
        )
    )
    feed_client = NWSClient(
        base_url=config.feed_url,
        timeout=config.feed_timeout_seconds,
        user_agent=config.user_agent,
    )
    push_client = FCMClient(
        FCMConfig(
            project_id=config.firebase_project_id,
            dry_run=config.push_dry_run,
        )
    )
    return Orchestrator(
        config,
        feed_client=feed_client,
        store=store,
        dispatcher=NotificationDispatcher(push_client, store),
    )


def _get_orchestrator() -> Orchestrator:
    """Load and validate config, then build the orchestrator once.

    Nothing is cached until the build succeeds, so a configuration error
    is raised again (and the config re-read) on every call until fixed.

    Raises:
        ValueError: If the configuration has critical errors
    """
    global _orchestrator
    if _orchestrator is None:
        config = _get_config()

        validation = validate_config(config)
        for warning in validation.warnings:
            logger.warning("Config %s: %s", warning.field, warning.message)
        if not validation.valid:
            messages = [f"{e.field}: {e.message}" for e in validation.critical_errors]
            raise ValueError("Invalid configuration: " + "; ".join(messages))

        _orchestrator = build_orchestrator(config)
    return _orchestrator


@functions_framework.http
def poll_weather_alerts(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function entry point.

    This function is triggered by Cloud Scheduler or direct HTTP requests.
    It runs a complete alert polling cycle.

    Args:
        request: Flask request object (not used, but required by framework)

    Returns:
        Tuple of (response dict, HTTP status code)
    """
    logger.info("Starting weather alert polling cycle")

    try:
        orchestrator = _get_orchestrator()
    except ValueError as e:
        logger.error("%s", e)
        return {
            "status": "error",
            "message": str(e),
        }, 400

    try:
        result = orchestrator.process()

        # Build response
        if result.feed_failed:
            status = "error"
        elif result.success:
            status = "success"
        else:
            status = "partial_failure"

        response = {
            "status": status,
            "summary": result.summary,
            "alerts_fetched": result.alerts_fetched,
            "alerts_new": result.alerts_new,
            "notifications_sent": len(result.notifications_sent),
            "notifications_failed": len(result.notifications_failed),
            "notifications_skipped": result.notifications_skipped,
            "alerts_purged": result.alerts_purged,
        }

        if result.errors:
            response["errors"] = result.errors

        logger.info("Completed: %s", result.summary)

        if result.feed_failed:
            status_code = 500
        else:
            status_code = 200 if result.success else 207  # 207 = Multi-Status
        return response, status_code

    except Exception as e:
        logger.exception("Unexpected error in weather alert poller")
        return {
            "status": "error",
            "message": str(e),
        }, 500


@functions_framework.cloud_event
def poll_weather_alerts_pubsub(cloud_event: Any) -> None:
    """Pub/Sub Cloud Function entry point.

    Alternative trigger for Cloud Scheduler via Pub/Sub.

    Args:
        cloud_event: CloudEvent from Pub/Sub
    """
    logger.info("Starting weather alert polling cycle (Pub/Sub trigger)")

    orchestrator = _get_orchestrator()
    result = orchestrator.process()

    logger.info("Completed: %s", result.summary)

    for error in result.errors:
        logger.error("Error: %s", error)


# For local testing
if __name__ == "__main__":
    print("Running weather alert poller locally...")

    # Mock request for local testing
    class MockRequest:
        pass

    response, status = poll_weather_alerts(MockRequest())
    print(f"\nResponse ({status}):")
    print(json.dumps(response, indent=2))
