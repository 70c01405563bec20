"""Unit tests for the GeoJSON and vector file input adapters."""

import json

import geopandas as gpd
import pytest
from shapely.geometry import LineString, MultiLineString, Point, Polygon

from triage.inputs.features import (
    features_from_collection,
    issue_from_feature,
    issues_from_features,
    line_geometry_from_shapely,
    read_issues,
    read_waterways,
    waterway_from_feature,
    waterways_from_features,
)
from triage.models.enums import IssueStatus, Severity
from triage.models.geometry import GeoLineString, GeoMultiLine
from triage.validation.errors import MalformedGeometryError


class TestIssueFeatures:
    """Tests for issue feature parsing."""

    def test_camel_case_properties(self, issue_feature):
        feature = issue_feature(
            "I-7", severity="HIGH", trailId="T-3", assignedTo="crew-b", status="assigned"
        )

        issue = issue_from_feature(feature)

        assert issue.id == "I-7"
        assert issue.location.lat == 39.6
        assert issue.location.lon == -105.0
        assert issue.severity is Severity.HIGH
        assert issue.status is IssueStatus.ASSIGNED
        assert issue.trail_id == "T-3"
        assert issue.assigned_to == "crew-b"
        assert issue.reported_at.year == 2024

    def test_snake_case_and_defaults(self):
        feature = {
            "type": "Feature",
            "id": 42,
            "geometry": {"type": "Point", "coordinates": [-105.0, 39.6]},
            "properties": {"reported_at": "2024-06-01T12:00:00", "park_id": "P-1"},
        }

        issue = issue_from_feature(feature)

        assert issue.id == "42"
        assert issue.severity is Severity.MEDIUM
        assert issue.category == "unknown"
        assert issue.status is IssueStatus.REPORTED
        assert issue.park_id == "P-1"

    def test_bad_features_reported_and_skipped(self, issue_feature):
        polygon = issue_feature("I-poly")
        polygon["geometry"] = {
            "type": "Polygon",
            "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]],
        }
        no_geometry = issue_feature("I-none")
        no_geometry["geometry"] = None
        out_of_range = issue_feature("I-range", lat=95.0)
        no_date = issue_feature("I-date")
        del no_date["properties"]["reportedAt"]

        issues, errors = issues_from_features(
            [issue_feature("I-1"), polygon, no_geometry, out_of_range, no_date, "junk"]
        )

        assert [i.id for i in issues] == ["I-1"]
        assert [e.feature_id for e in errors] == ["I-poly", "I-none", "I-range", "I-date", "#5"]
        assert "Point" in errors[0].message or "Polygon" in errors[0].message
        assert "reported_at" in errors[3].message


class TestWaterwayFeatures:
    """Tests for waterway feature parsing."""

    def test_line_string(self, waterway_feature):
        waterway = waterway_from_feature(waterway_feature("W-1", watershed="Clear Creek Basin"))

        assert waterway.id == "W-1"
        assert waterway.name == "Clear Creek"
        assert waterway.waterway_type == "creek"
        assert waterway.watershed == "Clear Creek Basin"
        assert isinstance(waterway.geometry, GeoLineString)

    def test_multi_line_string(self, waterway_feature):
        feature = waterway_feature("W-2")
        feature["geometry"] = {
            "type": "MultiLineString",
            "coordinates": [[[0, 0], [1, 1]], [[2, 2], [3, 3]]],
        }

        waterway = waterway_from_feature(feature)

        assert isinstance(waterway.geometry, GeoMultiLine)
        assert len(waterway.geometry.lines) == 2

    def test_missing_name_falls_back(self, waterway_feature):
        feature = waterway_feature("W-3")
        del feature["properties"]["name"]

        assert waterway_from_feature(feature).name == "Unnamed waterway"

    def test_bad_features_reported_and_skipped(self, waterway_feature):
        point = waterway_feature("W-point")
        point["geometry"] = {"type": "Point", "coordinates": [0, 0]}
        single_vertex = waterway_feature("W-short", coords=((0, 0),))

        waterways, errors = waterways_from_features(
            [point, waterway_feature("W-ok"), single_vertex]
        )

        assert [w.id for w in waterways] == ["W-ok"]
        assert [e.feature_id for e in errors] == ["W-point", "W-short"]


class TestLineGeometryFromShapely:
    """Tests for shapely conversion."""

    def test_line_string(self):
        geometry = line_geometry_from_shapely(LineString([(0, 1), (2, 3)]))
        assert [(p.lon, p.lat) for p in geometry.points] == [(0, 1), (2, 3)]

    def test_multi_line_string(self):
        geometry = line_geometry_from_shapely(
            MultiLineString([[(0, 0), (1, 1)], [(2, 2), (3, 3)]])
        )
        assert len(geometry.lines) == 2

    def test_empty_rejected(self):
        with pytest.raises(MalformedGeometryError, match="empty"):
            line_geometry_from_shapely(LineString())

    def test_polygon_rejected(self):
        with pytest.raises(MalformedGeometryError, match="Polygon"):
            line_geometry_from_shapely(Polygon([(0, 0), (1, 0), (1, 1)]))


class TestFeatureCollection:
    """Tests for features_from_collection."""

    def test_collection(self, collection, issue_feature):
        features = [issue_feature()]
        assert features_from_collection(collection(features)) == features

    def test_list_passes_through(self, issue_feature):
        features = [issue_feature()]
        assert features_from_collection(features) is features

    def test_other_types_rejected(self, issue_feature):
        with pytest.raises(ValueError, match="FeatureCollection"):
            features_from_collection(issue_feature())


class TestReadFiles:
    """Tests for reading vector files with geopandas."""

    def test_read_geojson(self, tmp_path, collection, issue_feature, waterway_feature):
        issues_path = tmp_path / "issues.geojson"
        issues_path.write_text(
            json.dumps(collection([issue_feature("I-1"), issue_feature("I-2", lat=39.61)]))
        )
        waterways_path = tmp_path / "waterways.geojson"
        waterways_path.write_text(json.dumps(collection([waterway_feature("W-1")])))

        issues, issue_errors = read_issues(issues_path)
        waterways, waterway_errors = read_waterways(waterways_path)

        assert [i.id for i in issues] == ["I-1", "I-2"]
        assert issues[1].location.lat == pytest.approx(39.61)
        assert [w.id for w in waterways] == ["W-1"]
        assert issue_errors == []
        assert waterway_errors == []

    def test_reprojects_to_wgs84(self, tmp_path):
        gdf = gpd.GeoDataFrame(
            {
                "id": ["I-1"],
                "severity": ["high"],
                "category": ["erosion"],
                "reported_at": ["2024-05-01T09:30:00"],
            },
            geometry=[Point(-105.0, 39.6)],
            crs="EPSG:4326",
        ).to_crs("EPSG:3857")
        path = tmp_path / "issues.gpkg"
        gdf.to_file(path, driver="GPKG")

        issues, errors = read_issues(path)

        assert errors == []
        assert issues[0].location.lat == pytest.approx(39.6, abs=1e-6)
        assert issues[0].location.lon == pytest.approx(-105.0, abs=1e-6)
        assert issues[0].severity is Severity.HIGH
