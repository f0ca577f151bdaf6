"""Weather Alerts API - FastAPI service for the mobile client.

Endpoints the app calls to register its location, push token and
notification preferences, and to read notification history. Deployed as a
single Cloud Run service next to the polling function.

Request and response bodies use the app's camelCase field names.
"""

import logging
import os
from functools import lru_cache
from typing import Any

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from weather_alerts.core.preferences import parse_preferences
from weather_alerts.shell.firestore_client import (
    DEFAULT_HISTORY_LIMIT,
    FirestoreClient,
    FirestoreConfig,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Weather Alerts API",
    description="Location, device and preference registration for weather alert notifications",
    version="1.0.0",
)


# ===== Data Models =====

class LocationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lat: float | None = None
    lon: float | None = None
    is_using_location: bool | None = Field(default=None, alias="isUsingLocation")
    selected_city: str | None = Field(default=None, alias="selectedCity")


class LocationUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    location: LocationPayload | None = None


class TokenUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    fcm_token: str | None = Field(default=None, alias="fcmToken")


class PreferencesUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    preferences: dict[str, Any] | None = None


# ===== Store =====

@lru_cache(maxsize=1)
def get_store() -> FirestoreClient:
    """Get the Firestore-backed store (one per process)."""
    return FirestoreClient(
        FirestoreConfig(database=os.environ.get("FIRESTORE_DATABASE") or None)
    )


# ===== Helper Functions =====

def _error(message: str, status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def _internal_error() -> JSONResponse:
    return _error("Internal server error", 500)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), like missing fields."""
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return _error("Invalid request body", 400)


# ===== Endpoints =====

@app.post("/updateUserLocation")
def update_user_location(body: LocationUpdate, store: FirestoreClient = Depends(get_store)):
    """Record the user's latest position."""
    if not body.user_id or body.location is None:
        return _error("Missing userId or location data", 400)

    location = body.location
    if location.lat is None or location.lon is None:
        return _error("Location requires lat and lon", 400)
    if not -90 <= location.lat <= 90 or not -180 <= location.lon <= 180:
        return _error("Location coordinates out of range", 400)

    try:
        store.save_location(body.user_id, location.model_dump(by_alias=True))
    except Exception:
        logger.exception("Error updating user location")
        return _internal_error()

    return {"success": True}


@app.post("/updateFcmToken")
def update_fcm_token(body: TokenUpdate, store: FirestoreClient = Depends(get_store)):
    """Register the device token used for push delivery."""
    if not body.user_id or not body.fcm_token:
        return _error("Missing userId or fcmToken", 400)

    try:
        store.save_fcm_token(body.user_id, body.fcm_token)
    except Exception:
        logger.exception("Error updating FCM token")
        return _internal_error()

    return {"success": True}


@app.post("/storeNotificationPreferences")
def store_notification_preferences(
    body: PreferencesUpdate,
    store: FirestoreClient = Depends(get_store),
):
    """Replace the user's notification preferences."""
    if not body.user_id or not body.preferences:
        return _error("Missing userId or preferences data", 400)

    try:
        parse_preferences(body.preferences)
    except ValueError as e:
        return _error(f"Invalid preferences: {e}", 400)

    try:
        store.save_preferences(body.user_id, body.preferences)
    except Exception:
        logger.exception("Error storing notification preferences")
        return _internal_error()

    return {"success": True}


@app.get("/loadNotificationPreferences")
def load_notification_preferences(
    user_id: str | None = Query(default=None, alias="userId"),
    store: FirestoreClient = Depends(get_store),
):
    """Return the user's stored preferences, or null."""
    if not user_id:
        return _error("Missing userId parameter", 400)

    try:
        return store.get_preferences(user_id)
    except Exception:
        logger.exception("Error loading notification preferences")
        return _internal_error()


@app.get("/loadNotificationHistory")
def load_notification_history(
    user_id: str | None = Query(default=None, alias="userId"),
    store: FirestoreClient = Depends(get_store),
):
    """Return the user's most recent notifications, newest first."""
    if not user_id:
        return _error("Missing userId parameter", 400)

    try:
        return store.get_notification_history(user_id, limit=DEFAULT_HISTORY_LIMIT)
    except Exception:
        logger.exception("Error loading notification history")
        return _internal_error()


@app.get("/health")
def health_check():
    """Health check endpoint for Cloud Run."""
    return {"status": "healthy"}
