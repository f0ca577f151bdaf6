"""NWS Alerts API Client - Imperative Shell.

This module handles HTTP communication with the National Weather Service
alerts API. All I/O is contained here; parsing and filtering are in the
core module.
"""

import json
import logging
import time
from typing import Any

import requests

from weather_alerts.core.config import DEFAULT_FEED_URL


logger = logging.getLogger(__name__)


# Default total time allowed for one feed fetch (seconds)
DEFAULT_TIMEOUT = 30

# Time allowed for establishing the connection (seconds)
CONNECT_TIMEOUT = 10

CHUNK_SIZE = 64 * 1024

DEFAULT_USER_AGENT = "severe-weather-alerts (ops@example.com)"


class FeedError(Exception):
    """Raised when the alert feed returns an unusable payload."""


class NWSClient:
    """Client for fetching active weather alerts from the NWS API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_FEED_URL,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize NWS client.

        Args:
            base_url: Active alerts endpoint
            timeout: Total time allowed for one fetch in seconds
            user_agent: User-Agent header (NWS rejects requests without one)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    def fetch_active_alerts(self, area: str) -> dict[str, Any]:
        """Fetch active alerts for an area.

        This method performs HTTP I/O. There is no partial result: any
        failure raises and the caller abandons the run.

        requests applies its timeout per socket operation, so a server
        that keeps trickling bytes would never trip it. The body is
        streamed instead and the whole fetch is held to ``timeout``
        seconds from the moment the request starts; connecting gets
        ``CONNECT_TIMEOUT`` of that.

        Args:
            area: State or marine zone code (e.g., "SD")

        Returns:
            Raw GeoJSON FeatureCollection

        Raises:
            requests.RequestException: If the request fails or times out
            FeedError: If the response is not a FeatureCollection
        """
        logger.info("Fetching active alerts from NWS for area %s", area)

        deadline = time.monotonic() + self.timeout

        with requests.get(
            self.base_url,
            params={"area": area},
            timeout=(min(CONNECT_TIMEOUT, self.timeout), self.timeout),
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/geo+json",
            },
            stream=True,
        ) as response:
            response.raise_for_status()

            chunks = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if time.monotonic() > deadline:
                    raise requests.Timeout(
                        f"Alert feed not read within {self.timeout}s"
                    )
                chunks.append(chunk)

        try:
            data = json.loads(b"".join(chunks))
        except ValueError as e:
            raise FeedError(f"Alert feed returned invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise FeedError("Alert feed response has no 'features' list")

        logger.info(
            "Fetched %d alerts from NWS",
            len(data["features"]),
        )

        return data
