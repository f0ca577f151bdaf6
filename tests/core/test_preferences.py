"""Unit tests for notification preferences.

Pure function tests - no mocks needed.
"""

import pytest

from weather_alerts.core.preferences import (
    NotificationPreferences,
    QuietHours,
    is_allowed,
    parse_preferences,
)


def quiet(start, end, enabled=True):
    return NotificationPreferences(
        quiet_hours=QuietHours(enabled=enabled, start_hour=start, end_hour=end)
    )


class TestQuietHours:
    """Tests for QuietHours window logic."""

    def test_wrapping_window(self):
        """22 to 6 covers the night across midnight."""
        window = QuietHours(enabled=True, start_hour=22, end_hour=6)
        assert window.blocks(23) is True
        assert window.blocks(0) is True
        assert window.blocks(6) is True
        assert window.blocks(12) is False
        assert window.blocks(21) is False

    def test_same_day_window(self):
        window = QuietHours(enabled=True, start_hour=1, end_hour=5)
        assert window.blocks(3) is True
        assert window.blocks(1) is True
        assert window.blocks(5) is True
        assert window.blocks(20) is False

    @pytest.mark.parametrize("start,end", [(-1, 5), (1, 24), (True, 5), ("1", 5)])
    def test_invalid_hours_rejected(self, start, end):
        with pytest.raises(ValueError):
            QuietHours(enabled=True, start_hour=start, end_hour=end)


class TestIsAllowed:
    """Tests for is_allowed() function."""

    def test_wrapping_window_blocks_night(self):
        assert is_allowed(quiet(22, 6), 23) is False

    def test_wrapping_window_allows_midday(self):
        assert is_allowed(quiet(22, 6), 12) is True

    def test_same_day_window_blocks_inside(self):
        assert is_allowed(quiet(1, 5), 3) is False

    def test_same_day_window_allows_outside(self):
        assert is_allowed(quiet(1, 5), 20) is True

    def test_disabled_allows_everything(self):
        prefs = quiet(0, 23, enabled=False)
        assert all(is_allowed(prefs, hour) for hour in range(24))

    def test_not_configured_allows_everything(self):
        prefs = NotificationPreferences.not_configured()
        assert all(is_allowed(prefs, hour) for hour in range(24))

    def test_none_allows_everything(self):
        assert is_allowed(None, 3) is True


class TestParsePreferences:
    """Tests for parse_preferences() function."""

    def test_none_is_not_configured(self):
        prefs = parse_preferences(None)
        assert prefs.configured is False

    def test_without_dnd_is_configured_and_disabled(self):
        prefs = parse_preferences({"alertTypes": ["Tornado Warning"]})
        assert prefs.configured is True
        assert prefs.quiet_hours.enabled is False

    def test_parses_dnd(self):
        prefs = parse_preferences({
            "doNotDisturb": {"enabled": True, "startHour": 21, "endHour": 6},
        })
        assert prefs.quiet_hours == QuietHours(enabled=True, start_hour=21, end_hour=6)

    def test_missing_hours_use_defaults(self):
        prefs = parse_preferences({"doNotDisturb": {"enabled": True}})
        assert prefs.quiet_hours.start_hour == 22
        assert prefs.quiet_hours.end_hour == 7

    def test_integral_float_and_string_hours(self):
        prefs = parse_preferences({
            "doNotDisturb": {"enabled": True, "startHour": 21.0, "endHour": "6"},
        })
        assert prefs.quiet_hours.start_hour == 21
        assert prefs.quiet_hours.end_hour == 6

    @pytest.mark.parametrize("dnd", [
        {"enabled": True, "startHour": 25, "endHour": 6},
        {"enabled": True, "startHour": "late", "endHour": 6},
        {"enabled": True, "startHour": 21.5, "endHour": 6},
        {"enabled": True, "startHour": 21, "endHour": None},
        "yes",
    ])
    def test_invalid_dnd_raises(self, dnd):
        with pytest.raises(ValueError):
            parse_preferences({"doNotDisturb": dnd})
