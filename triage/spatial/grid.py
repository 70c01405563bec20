"""Grid aggregation of issue points into fixed-size cells.

The grid edge is converted from metres to decimal degrees with the constant
1 degree ~= 111,320 m for both latitude and longitude. This is a known
simplification: cells are square in degrees, so at district scale they are
roughly square on the ground, but they narrow east-west with latitude
(about 0.64 of the nominal width at 50 degrees). It is deliberately not
latitude-corrected so cell keys stay consistent with the rest of the system.
"""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from triage.config import CONSTANTS
from triage.models.domain import IssueRecord
from triage.models.geometry import GeoPoint

logger = logging.getLogger(__name__)

CellKey = tuple[int, int]


@dataclass
class GridCell:
    """Ephemeral aggregation bucket created per run and discarded after scoring."""

    key: CellKey
    center: GeoPoint
    issues: list[IssueRecord] = field(default_factory=list)

    @property
    def issue_count(self) -> int:
        return len(self.issues)


def grid_edge_degrees(grid_size_m: float) -> float:
    """Convert a grid edge length in metres to approximate decimal degrees.

    Raises:
        ValueError: If grid_size_m is not a positive finite number
    """
    if not math.isfinite(grid_size_m) or grid_size_m <= 0:
        msg = f"Grid size must be a positive number of metres, got {grid_size_m}"
        raise ValueError(msg)
    return grid_size_m / CONSTANTS.METRES_PER_DEGREE


def cell_index(value_deg: float, edge_deg: float) -> int:
    """Round a coordinate to the nearest multiple of the edge length.

    Halves round up (towards +infinity) in both hemispheres, so a point
    exactly on a cell boundary always lands in the same cell.
    """
    return math.floor(value_deg / edge_deg + 0.5)


def cell_key(point: GeoPoint, edge_deg: float) -> CellKey:
    """Return the (lat, lon) cell indices for a point."""
    return cell_index(point.lat, edge_deg), cell_index(point.lon, edge_deg)


def cell_center(key: CellKey, edge_deg: float) -> GeoPoint:
    """Return the centre point of a cell, clamped to valid WGS84 ranges."""
    lat_index, lon_index = key
    lat = min(max(lat_index * edge_deg, -90.0), 90.0)
    lon = min(max(lon_index * edge_deg, -180.0), 180.0)
    return GeoPoint(lat=lat, lon=lon)


def aggregate_issues(issues: Iterable[IssueRecord], grid_size_m: float = 200.0) -> list[GridCell]:
    """Group issues into grid cells.

    Cell membership depends only on the grid size and each issue's
    coordinates. Cells are returned in order of their first member, so the
    same input always yields the same list.

    Args:
        issues: Issues to aggregate
        grid_size_m: Grid cell edge length in metres

    Returns:
        Non-empty cells in first-seen order (empty list for no issues)
    """
    edge_deg = grid_edge_degrees(grid_size_m)
    cells: dict[CellKey, GridCell] = {}

    for issue in issues:
        key = cell_key(issue.location, edge_deg)
        cell = cells.get(key)
        if cell is None:
            cell = GridCell(key=key, center=cell_center(key, edge_deg))
            cells[key] = cell
        cell.issues.append(issue)

    logger.debug(f"Aggregated issues into {len(cells)} grid cells of {grid_size_m}m")

    return list(cells.values())
