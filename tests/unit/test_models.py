"""Unit tests for domain and geometry models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from triage.models.domain import IssueRecord, WaterwayFeature
from triage.models.enums import IssueStatus, Severity
from triage.models.geometry import GeoLineString, GeoMultiLine, GeoPoint, LineGeometry


class TestGeometryModels:
    """Tests for geometry value objects."""

    @pytest.mark.parametrize(
        "lat,lon", [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0), (float("nan"), 0.0)]
    )
    def test_point_out_of_range_rejected(self, lat, lon):
        with pytest.raises(ValidationError):
            GeoPoint(lat=lat, lon=lon)

    def test_point_from_lonlat_ignores_elevation(self):
        point = GeoPoint.from_lonlat([-105.0, 39.6, 1800.0])
        assert (point.lat, point.lon) == (39.6, -105.0)

    def test_line_needs_two_points(self):
        with pytest.raises(ValidationError):
            GeoLineString.from_lonlat([(-105.0, 39.6)])

    def test_multi_line_needs_a_part(self):
        with pytest.raises(ValidationError):
            GeoMultiLine(lines=())

    def test_line_geometry_discriminated_by_type(self):
        adapter = TypeAdapter(LineGeometry)

        line = adapter.validate_python(
            {"type": "LineString", "points": [{"lat": 0, "lon": 0}, {"lat": 1, "lon": 1}]}
        )
        multi = adapter.validate_python(
            {
                "type": "MultiLineString",
                "lines": [{"points": [{"lat": 0, "lon": 0}, {"lat": 1, "lon": 1}]}],
            }
        )

        assert isinstance(line, GeoLineString)
        assert isinstance(multi, GeoMultiLine)

    def test_polygon_type_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(LineGeometry).validate_python({"type": "Polygon", "points": []})

    def test_frozen(self):
        point = GeoPoint(lat=0, lon=0)
        with pytest.raises(ValidationError):
            point.lat = 1.0


class TestIssueRecord:
    """Tests for IssueRecord."""

    def test_known_severity_coerced(self, make_issue):
        assert make_issue(severity=" Critical ").severity is Severity.CRITICAL

    def test_unknown_severity_kept(self, make_issue):
        issue = make_issue(severity="urgent")
        assert issue.severity == "urgent"
        assert not isinstance(issue.severity, Severity)

    def test_is_open(self, make_issue):
        assert make_issue().is_open()
        assert not make_issue(status=IssueStatus.RESOLVED).is_open()

    def test_requires_reported_at(self):
        with pytest.raises(ValidationError):
            IssueRecord(id="I-1", location=GeoPoint(lat=0, lon=0), severity="low", category="x")


class TestWaterwayFeature:
    """Tests for WaterwayFeature."""

    def test_default_name(self):
        feature = WaterwayFeature(
            id="W-1", geometry=GeoLineString.from_lonlat([(0, 0), (1, 1)])
        )
        assert feature.name == "Unnamed waterway"
