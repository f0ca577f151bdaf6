"""Tests for the NotificationDispatcher.

Push client and store are mocks.
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from weather_alerts.core.alert import Alert
from weather_alerts.dispatcher import NotificationDispatcher
from weather_alerts.shell.fcm_client import PushResponse


NOW = datetime(2024, 6, 1, 22, 30, tzinfo=timezone.utc)


@pytest.fixture
def alert():
    return Alert(
        raw_id="https://api.weather.gov/alerts/abc",
        storage_key="alerts_abc",
        event_type="Severe Thunderstorm Warning",
        area_description="Minnehaha, SD",
        headline="Severe storms approaching",
    )


@pytest.fixture
def push_client():
    client = Mock()
    client.send.return_value = PushResponse(success=True, message_id="projects/p/messages/1")
    return client


@pytest.fixture
def store():
    return Mock()


@pytest.fixture
def dispatcher(push_client, store):
    return NotificationDispatcher(push_client, store, clock=lambda: NOW)


class TestDispatch:
    """Tests for NotificationDispatcher.dispatch()."""

    def test_success_sends_and_records(self, dispatcher, push_client, store, alert):
        result = dispatcher.dispatch(alert, "user-1", "tok-1")

        assert result.success is True
        assert result.message_id == "projects/p/messages/1"

        message = push_client.send.call_args.args[0]
        assert message["token"] == "tok-1"
        assert message["notification"]["title"] == "Severe Thunderstorm Warning"

        user_id, record = store.add_notification_record.call_args.args
        assert user_id == "user-1"
        assert record["alertId"] == alert.raw_id
        assert record["sentAt"] == NOW
        assert record["notifiedDevices"] == ["tok-1"]
        assert record["fcmResponse"] == "projects/p/messages/1"

    @pytest.mark.parametrize("token", [None, ""])
    def test_no_token_is_skipped(self, dispatcher, push_client, store, alert, token):
        result = dispatcher.dispatch(alert, "user-1", token)

        assert result.skipped is True
        assert result.reason == "no push token"
        push_client.send.assert_not_called()
        store.add_notification_record.assert_not_called()

    def test_send_failure_is_not_recorded(self, dispatcher, push_client, store, alert):
        push_client.send.return_value = PushResponse(success=False, error="FCM error: UNAVAILABLE")

        result = dispatcher.dispatch(alert, "user-1", "tok-1")

        assert result.success is False
        assert result.skipped is False
        assert result.error == "FCM error: UNAVAILABLE"
        store.add_notification_record.assert_not_called()

    def test_history_failure_still_counts_as_sent(self, dispatcher, store, alert):
        store.add_notification_record.side_effect = RuntimeError("write failed")

        result = dispatcher.dispatch(alert, "user-1", "tok-1")

        assert result.success is True


class TestSendTimestamp:
    """Tests for the sentAt stamp on history records."""

    def test_each_dispatch_stamped_at_send_time(self, push_client, store, alert):
        clock = Mock(side_effect=[NOW, NOW + timedelta(seconds=2)])
        dispatcher = NotificationDispatcher(push_client, store, clock=clock)

        dispatcher.dispatch(alert, "user-1", "tok-1")
        dispatcher.dispatch(alert, "user-2", "tok-2")

        first, second = (c.args[1]["sentAt"] for c in store.add_notification_record.call_args_list)
        assert first < second

    def test_stamped_after_push_accepted(self, push_client, store, alert):
        events = []
        push_client.send.side_effect = lambda message: (
            events.append("send") or PushResponse(success=True, message_id="m1")
        )

        def clock():
            events.append("clock")
            return NOW

        NotificationDispatcher(push_client, store, clock=clock).dispatch(alert, "user-1", "tok-1")

        assert events == ["send", "clock"]

    def test_default_clock_is_current_utc_time(self, push_client, store, alert):
        before = datetime.now(timezone.utc)

        NotificationDispatcher(push_client, store).dispatch(alert, "user-1", "tok-1")

        sent_at = store.add_notification_record.call_args.args[1]["sentAt"]
        assert sent_at.tzinfo is not None
        assert before <= sent_at <= datetime.now(timezone.utc)

    def test_failed_send_does_not_read_clock(self, push_client, store, alert):
        push_client.send.return_value = PushResponse(success=False, error="FCM error: INTERNAL")
        clock = Mock(return_value=NOW)

        NotificationDispatcher(push_client, store, clock=clock).dispatch(alert, "user-1", "tok-1")

        clock.assert_not_called()
