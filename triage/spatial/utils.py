"""General spatial utilities.

This module provides common spatial utilities for the input adapters:
- CRS validation and transformation to WGS84
"""

import geopandas as gpd

from triage.config import CONSTANTS


def ensure_crs(gdf: gpd.GeoDataFrame, target_crs: str = CONSTANTS.CRS_WGS84) -> gpd.GeoDataFrame:
    """Ensure GeoDataFrame is in the target CRS, transforming if necessary.

    Args:
        gdf: Input GeoDataFrame
        target_crs: Target coordinate reference system (default: EPSG:4326 / WGS84)

    Returns:
        GeoDataFrame in target CRS (transformed if necessary, original if
        already correct)

    Raises:
        ValueError: If input GeoDataFrame has no CRS defined
    """
    if gdf.crs is None:
        msg = "Input GeoDataFrame has no CRS defined"
        raise ValueError(msg)

    if gdf.crs != target_crs:
        return gdf.to_crs(target_crs)

    return gdf
