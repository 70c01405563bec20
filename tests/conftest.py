"""Shared fixtures: issue and waterway factories and GeoJSON builders."""

from datetime import UTC, datetime

import pytest

from triage.config import CONSTANTS
from triage.models.domain import IssueRecord, WaterwayFeature
from triage.models.geometry import GeoLineString, GeoPoint

REPORTED_AT = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)

# Default 200 m grid edge in degrees
GRID_EDGE = 200.0 / CONSTANTS.METRES_PER_DEGREE


@pytest.fixture
def cell_centre() -> tuple[float, float]:
    """(lat, lon) of an exact 200 m grid cell centre near Golden, Colorado."""
    return 22040 * GRID_EDGE, -58443 * GRID_EDGE


@pytest.fixture
def make_issue():
    """Factory for IssueRecord with sensible defaults."""

    def _make(
        issue_id: str = "I-1",
        lat: float = 39.6,
        lon: float = -105.0,
        severity: str = "medium",
        category: str = "erosion",
        **kwargs,
    ) -> IssueRecord:
        kwargs.setdefault("reported_at", REPORTED_AT)
        return IssueRecord(
            id=issue_id,
            location=GeoPoint(lat=lat, lon=lon),
            severity=severity,
            category=category,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_waterway():
    """Factory for WaterwayFeature from [lon, lat] coordinates."""

    def _make(
        waterway_id: str = "W-1",
        coords=((-105.0, 39.59), (-105.0, 39.61)),
        name: str = "Clear Creek",
        **kwargs,
    ) -> WaterwayFeature:
        kwargs.setdefault("geometry", GeoLineString.from_lonlat(coords))
        return WaterwayFeature(id=waterway_id, name=name, **kwargs)

    return _make


@pytest.fixture
def issue_feature():
    """Factory for a GeoJSON issue Feature."""

    def _make(issue_id="I-1", lon=-105.0, lat=39.6, **properties) -> dict:
        props = {
            "id": issue_id,
            "severity": "medium",
            "category": "erosion",
            "status": "reported",
            "reportedAt": "2024-05-01T09:30:00Z",
        }
        props.update(properties)
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [lon, lat]},
            "properties": props,
        }

    return _make


@pytest.fixture
def waterway_feature():
    """Factory for a GeoJSON waterway Feature."""

    def _make(waterway_id="W-1", coords=((-105.0, 39.59), (-105.0, 39.61)), **properties) -> dict:
        props = {"id": waterway_id, "name": "Clear Creek", "type": "creek"}
        props.update(properties)
        return {
            "type": "Feature",
            "geometry": {"type": "LineString", "coordinates": [list(c) for c in coords]},
            "properties": props,
        }

    return _make


def feature_collection(features: list[dict]) -> dict:
    """Wrap features in a GeoJSON FeatureCollection."""
    return {"type": "FeatureCollection", "features": features}


@pytest.fixture
def collection():
    """Builder for GeoJSON FeatureCollections."""
    return feature_collection
