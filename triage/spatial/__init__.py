"""Spatial operations for maintenance triage.

This package provides:
- Distance primitives (haversine, point-to-segment, point-to-line, unit conversion)
- Grid aggregation of issue points
- Nearest waterway lookups
- General utilities (CRS handling)

Commonly used exports:
- haversine_distance: Great-circle distance in metres
- point_to_segment_distance: Distance to a finite segment in metres
- point_to_line_distance: Distance to a line or multi-line in metres
- aggregate_issues: Bin issues into grid cells
- nearest_waterways: Nearest waterway and distance per issue
- ensure_crs: CRS validation and transformation
"""

from triage.spatial.distance import (
    convert_distance,
    haversine_distance,
    metres_to_feet,
    metres_to_miles,
    point_to_line_distance,
    point_to_segment_distance,
)
from triage.spatial.grid import GridCell, aggregate_issues, grid_edge_degrees
from triage.spatial.utils import ensure_crs
from triage.spatial.waterways import (
    PreparedWaterway,
    WaterwayIndex,
    is_near_waterway,
    nearest_waterway,
    nearest_waterways,
    prepare_waterways,
)

__all__ = [
    "haversine_distance",
    "point_to_segment_distance",
    "point_to_line_distance",
    "convert_distance",
    "metres_to_feet",
    "metres_to_miles",
    "GridCell",
    "aggregate_issues",
    "grid_edge_degrees",
    "PreparedWaterway",
    "WaterwayIndex",
    "prepare_waterways",
    "nearest_waterway",
    "nearest_waterways",
    "is_near_waterway",
    "ensure_crs",
]
