"""Unit tests for configuration validation."""

from weather_alerts.core.config import Config, validate_config


def fields(result, severity):
    return {e.field for e in result.errors if e.severity == severity}


class TestValidateConfig:
    """Tests for validate_config() function."""

    def test_defaults_are_valid(self):
        result = validate_config(Config())
        assert result.valid is True
        assert result.critical_errors == []

    def test_bad_feed_url(self):
        result = validate_config(Config(feed_url="ftp://example.com"))
        assert result.valid is False
        assert "feed_url" in fields(result, "error")

    def test_non_positive_values(self):
        result = validate_config(Config(
            feed_timeout_seconds=0,
            retention_days=-1,
            stale_location_hours=0,
        ))
        assert result.valid is False
        assert fields(result, "error") == {
            "feed_timeout_seconds",
            "retention_days",
            "stale_location_hours",
        }

    def test_concurrency_bounds(self):
        assert validate_config(Config(max_concurrent_users=0)).valid is False
        assert validate_config(Config(max_concurrent_users=51)).valid is False
        assert validate_config(Config(max_concurrent_users=50)).valid is True

    def test_odd_area_is_warning(self):
        result = validate_config(Config(feed_area="south dakota"))
        assert result.valid is True
        assert "feed_area" in fields(result, "warning")

    def test_user_agent_without_contact_is_warning(self):
        result = validate_config(Config(user_agent="my-app"))
        assert result.valid is True
        assert [w.field for w in result.warnings] == ["user_agent"]

    def test_dry_run_is_warning(self):
        result = validate_config(Config(push_dry_run=True))
        assert result.valid is True
        assert "push_dry_run" in fields(result, "warning")
