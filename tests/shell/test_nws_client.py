"""Tests for the NWS alerts API client.

HTTP is mocked with the responses library.
"""

import itertools
from unittest.mock import patch

import pytest
import requests
import responses
from responses import matchers

from weather_alerts.core.config import DEFAULT_FEED_URL
from weather_alerts.shell.nws_client import CONNECT_TIMEOUT, FeedError, NWSClient


@pytest.fixture
def client():
    return NWSClient(user_agent="test-agent (test@example.com)", timeout=5)


class TestFetchActiveAlerts:
    """Tests for NWSClient.fetch_active_alerts()."""

    @responses.activate
    def test_returns_feature_collection(self, client):
        payload = {"type": "FeatureCollection", "features": [{"id": "a"}]}
        responses.add(
            responses.GET,
            DEFAULT_FEED_URL,
            json=payload,
            match=[matchers.query_param_matcher({"area": "SD"})],
        )

        result = client.fetch_active_alerts("SD")

        assert result == payload

    @responses.activate
    def test_sends_user_agent_and_accept(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"features": []})

        client.fetch_active_alerts("SD")

        headers = responses.calls[0].request.headers
        assert headers["User-Agent"] == "test-agent (test@example.com)"
        assert headers["Accept"] == "application/geo+json"

    @responses.activate
    def test_http_error_raises(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, status=503)

        with pytest.raises(requests.HTTPError):
            client.fetch_active_alerts("SD")

    @responses.activate
    def test_timeout_raises(self, client):
        responses.add(
            responses.GET,
            DEFAULT_FEED_URL,
            body=requests.exceptions.ConnectTimeout("timed out"),
        )

        with pytest.raises(requests.RequestException):
            client.fetch_active_alerts("SD")

    @responses.activate
    def test_invalid_json_raises_feed_error(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, body="<html>oops</html>")

        with pytest.raises(FeedError):
            client.fetch_active_alerts("SD")

    @responses.activate
    def test_missing_features_raises_feed_error(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"type": "FeatureCollection"})

        with pytest.raises(FeedError):
            client.fetch_active_alerts("SD")

    @responses.activate
    def test_custom_base_url(self):
        client = NWSClient(base_url="https://feed.example.com/alerts")
        responses.add(responses.GET, "https://feed.example.com/alerts", json={"features": []})

        assert client.fetch_active_alerts("MN") == {"features": []}


class TestTimeouts:
    """Tests for the connect/read timeouts and the total fetch deadline."""

    @responses.activate
    def test_connect_and_read_timeouts_passed(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"features": []})

        client.fetch_active_alerts("SD")

        assert responses.calls[0].request.req_kwargs["timeout"] == (5, 5)
        assert responses.calls[0].request.req_kwargs["stream"] is True

    @responses.activate
    def test_connect_timeout_capped_at_default(self):
        client = NWSClient(timeout=60)
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"features": []})

        client.fetch_active_alerts("SD")

        assert responses.calls[0].request.req_kwargs["timeout"] == (CONNECT_TIMEOUT, 60)

    @responses.activate
    def test_slow_body_exceeding_total_deadline_raises(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"features": [{"id": "a"}]})

        with patch("weather_alerts.shell.nws_client.time") as mock_time:
            # Request starts at t=0; first chunk arrives well past the 5s budget
            mock_time.monotonic.side_effect = [0.0, 999.0]

            with pytest.raises(requests.Timeout):
                client.fetch_active_alerts("SD")

    @responses.activate
    def test_body_within_deadline_is_returned(self, client):
        responses.add(responses.GET, DEFAULT_FEED_URL, json={"features": [{"id": "a"}]})

        with patch("weather_alerts.shell.nws_client.time") as mock_time:
            mock_time.monotonic.side_effect = itertools.count(0.0, 1.0)

            assert client.fetch_active_alerts("SD") == {"features": [{"id": "a"}]}
