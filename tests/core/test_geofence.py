"""Unit tests for geofence matching.

Pure function tests - no mocks needed.
"""

import math

import pytest

from weather_alerts.core.alert import PointGeometry, PolygonGeometry
from weather_alerts.core.geo import EARTH_RADIUS_KM
from weather_alerts.core.geofence import (
    MatchRequest,
    MatchResult,
    area_description,
    centroid_radius,
    evaluate,
    get_geometry_center,
    matches,
    polygon_containment,
)


CENTER_LAT = 43.0
CENTER_LON = -100.0


def degrees_north(km: float) -> float:
    """Latitude offset for a due-north distance."""
    return km / (EARTH_RADIUS_KM * math.pi / 180)


@pytest.fixture
def square():
    """The 10x10 square from the origin, as (lon, lat) pairs."""
    return PolygonGeometry(ring=((0, 0), (0, 10), (10, 10), (10, 0)))


@pytest.fixture
def small_box():
    """A small polygon centered on CENTER_LAT/CENTER_LON."""
    return PolygonGeometry(ring=(
        (CENTER_LON - 0.1, CENTER_LAT - 0.1),
        (CENTER_LON - 0.1, CENTER_LAT + 0.1),
        (CENTER_LON + 0.1, CENTER_LAT + 0.1),
        (CENTER_LON + 0.1, CENTER_LAT - 0.1),
    ))


def request_for(lat, lon, geometry, event_type="Tornado Warning", area=None):
    return MatchRequest(
        user_lat=lat,
        user_lon=lon,
        geometry=geometry,
        event_type=event_type,
        area_description=area,
    )


class TestPolygonContainment:
    """Tests for the polygon_containment strategy."""

    def test_inside_is_matched(self, square):
        assert polygon_containment(request_for(5, 5, square)) is MatchResult.MATCHED

    def test_outside_defers(self, square):
        """Outside the polygon is not a decision; the radius check runs next."""
        result = polygon_containment(request_for(15, 15, square))
        assert result is MatchResult.NOT_APPLICABLE

    def test_point_geometry_not_applicable(self):
        result = polygon_containment(request_for(5, 5, PointGeometry(lon=5, lat=5)))
        assert result is MatchResult.NOT_APPLICABLE


class TestCentroidRadius:
    """Tests for the centroid_radius strategy."""

    def test_no_geometry_not_applicable(self):
        assert centroid_radius(request_for(5, 5, None)) is MatchResult.NOT_APPLICABLE

    def test_warning_at_80km_not_matched(self, small_box):
        lat = CENTER_LAT + degrees_north(80)
        result = centroid_radius(request_for(lat, CENTER_LON, small_box, "Tornado Warning"))
        assert result is MatchResult.NOT_MATCHED

    def test_watch_at_80km_matched(self, small_box):
        lat = CENTER_LAT + degrees_north(80)
        result = centroid_radius(request_for(lat, CENTER_LON, small_box, "Tornado Watch"))
        assert result is MatchResult.MATCHED

    def test_point_geometry_uses_point(self):
        point = PointGeometry(lon=CENTER_LON, lat=CENTER_LAT)
        lat = CENTER_LAT + degrees_north(90)
        assert centroid_radius(request_for(lat, CENTER_LON, point, "Wind Advisory")) is MatchResult.MATCHED
        assert centroid_radius(request_for(lat, CENTER_LON, point, "Flood Warning")) is MatchResult.NOT_MATCHED


class TestAreaDescription:
    """Tests for the area_description strategy."""

    def test_county_in_area_matched(self):
        """Sioux Falls is in Minnehaha County."""
        request = request_for(43.5446, -96.7311, None, area="Minnehaha, SD; Lincoln, SD")
        assert area_description(request) is MatchResult.MATCHED

    def test_case_insensitive(self):
        request = request_for(43.5446, -96.7311, None, area="MINNEHAHA")
        assert area_description(request) is MatchResult.MATCHED

    def test_county_not_in_area(self):
        """Rapid City (Pennington) is not in a Minnehaha alert."""
        request = request_for(44.0805, -103.2310, None, area="Minnehaha, SD")
        assert area_description(request) is MatchResult.NOT_MATCHED

    def test_only_used_without_geometry(self, square):
        request = request_for(43.5446, -96.7311, square, area="Minnehaha, SD")
        assert area_description(request) is MatchResult.NOT_APPLICABLE

    def test_empty_area_not_applicable(self):
        assert area_description(request_for(43.5, -96.7, None, area="")) is MatchResult.NOT_APPLICABLE


class TestEvaluate:
    """Tests for evaluate() strategy ordering."""

    def test_polygon_decides_first(self, square):
        result, strategy = evaluate(request_for(5, 5, square))
        assert result is MatchResult.MATCHED
        assert strategy == "polygon_containment"

    def test_falls_back_to_radius(self, square):
        result, strategy = evaluate(request_for(15, 15, square))
        assert result is MatchResult.NOT_MATCHED
        assert strategy == "centroid_radius"

    def test_falls_back_to_area(self):
        result, strategy = evaluate(request_for(43.5446, -96.7311, None, area="Minnehaha, SD"))
        assert result is MatchResult.MATCHED
        assert strategy == "area_description"

    def test_nothing_applicable(self):
        result, strategy = evaluate(request_for(43.5, -96.7, None, area=None))
        assert result is MatchResult.NOT_APPLICABLE
        assert strategy is None

    def test_custom_strategies(self, square):
        result, strategy = evaluate(request_for(15, 15, square), strategies=[polygon_containment])
        assert result is MatchResult.NOT_APPLICABLE
        assert strategy is None


class TestMatches:
    """Tests for matches() function."""

    def test_inside_square(self, square):
        assert matches(5, 5, square, "Tornado Warning", None) is True

    def test_outside_square(self, square):
        assert matches(15, 15, square, "Tornado Warning", None) is False

    def test_near_polygon_within_radius(self, small_box):
        """Outside the polygon but within the watch radius of its center."""
        lat = CENTER_LAT + degrees_north(100)
        assert matches(lat, CENTER_LON, small_box, "Winter Storm Watch", None) is True

    def test_no_geometry_no_area(self):
        assert matches(43.5, -96.7, None, "Tornado Warning", None) is False


class TestGetGeometryCenter:
    """Tests for get_geometry_center() function."""

    def test_polygon_center_is_lat_lon(self, small_box):
        lat, lon = get_geometry_center(small_box)
        assert lat == pytest.approx(CENTER_LAT)
        assert lon == pytest.approx(CENTER_LON)

    def test_point_center(self):
        assert get_geometry_center(PointGeometry(lon=-96.7, lat=43.5)) == (43.5, -96.7)
