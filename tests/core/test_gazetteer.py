"""Unit tests for the locality gazetteer."""

from weather_alerts.core.gazetteer import (
    Locality,
    SOUTH_DAKOTA_LOCALITIES,
    area_mentions_any,
    find_nearest_locality,
)


class TestFindNearestLocality:
    """Tests for find_nearest_locality() function."""

    def test_nearest_to_sioux_falls(self):
        locality, distance = find_nearest_locality(43.545, -96.731)
        assert locality.name == "Sioux Falls"
        assert distance < 1

    def test_nearest_to_rapid_city(self):
        locality, _ = find_nearest_locality(44.08, -103.23)
        assert locality.name == "Rapid City"
        assert locality.counties == ("Pennington",)

    def test_custom_gazetteer(self):
        places = (Locality("A", 0.0, 0.0, ("Alpha",)), Locality("B", 10.0, 10.0, ("Beta",)))
        locality, _ = find_nearest_locality(9.0, 9.0, places)
        assert locality.name == "B"

    def test_empty_gazetteer(self):
        assert find_nearest_locality(43.5, -96.7, ()) is None

    def test_gazetteer_has_entries(self):
        assert len(SOUTH_DAKOTA_LOCALITIES) > 50


class TestAreaMentionsAny:
    """Tests for area_mentions_any() function."""

    def test_mentions(self):
        assert area_mentions_any("Minnehaha, SD; Lincoln, SD", ("Lincoln",)) is True

    def test_case_insensitive(self):
        assert area_mentions_any("PENNINGTON, SD", ("Pennington",)) is True

    def test_no_mention(self):
        assert area_mentions_any("Brown, SD", ("Minnehaha", "Lincoln")) is False
