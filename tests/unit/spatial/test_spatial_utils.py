"""Unit tests for spatial utilities."""

import geopandas as gpd
import pytest
from shapely.geometry import Point


def test_ensure_crs_no_transformation_when_already_wgs84():
    """Test that no transformation occurs when GDF is already in WGS84."""
    from triage.spatial import ensure_crs

    gdf = gpd.GeoDataFrame({"id": [1]}, geometry=[Point(-105.0, 39.6)], crs="EPSG:4326")

    result = ensure_crs(gdf)

    assert result is gdf


def test_ensure_crs_reprojects_web_mercator():
    """Test that Web Mercator input is brought back to degrees."""
    from triage.spatial import ensure_crs

    gdf = gpd.GeoDataFrame(
        {"id": [1]}, geometry=[Point(-105.0, 39.6)], crs="EPSG:4326"
    ).to_crs("EPSG:3857")

    result = ensure_crs(gdf)

    assert result.crs == "EPSG:4326"
    assert result is not gdf
    assert result.geometry.iloc[0].x == pytest.approx(-105.0)
    assert result.geometry.iloc[0].y == pytest.approx(39.6)


def test_ensure_crs_raises_error_when_no_crs():
    """Test that error is raised when input has no CRS."""
    from triage.spatial import ensure_crs

    gdf = gpd.GeoDataFrame({"id": [1]}, geometry=[Point(-105.0, 39.6)])

    with pytest.raises(ValueError, match="no CRS defined"):
        ensure_crs(gdf)
