"""Nearest waterway lookups for issue points.

Waterway geometry is converted to coordinate arrays once per batch by
prepare_waterways(). Features whose geometry cannot be used are logged and
dropped there, so a single bad feature never aborts a batch and never
affects the results of the others.

The prepared batch is a WaterwayIndex: the segments of every waterway
stacked into one pair of endpoint arrays, with a segment-to-waterway map.
Each query point is measured against the whole layer in one vectorised
call. Callers that re-render often should still cache the result of
nearest_waterways() until the issue or waterway set changes (see
triage.engine.PriorityEngine).
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

import numpy as np

from triage.models.domain import IssueRecord, NearestWaterwayResult, WaterwayFeature
from triage.models.geometry import GeoPoint
from triage.spatial.distance import (
    distance_to_segments,
    line_parts,
    metres_to_feet,
    segment_endpoints,
)
from triage.validation.errors import MalformedGeometryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedWaterway:
    """A waterway with its geometry converted to [lat, lon] arrays, one per part."""

    feature: WaterwayFeature
    parts: list[np.ndarray]


def _empty_segments() -> np.ndarray:
    return np.empty((0, 2))


@dataclass(frozen=True, eq=False)
class WaterwayIndex:
    """Prepared waterways with all of their segments stacked together.

    Attributes:
        waterways: Prepared waterways in input order
        starts: ``(m, 2)`` [lat, lon] start of every segment, grouped by waterway
        ends: ``(m, 2)`` [lat, lon] end of every segment
        owners: Position in ``waterways`` of the waterway each segment belongs to
    """

    waterways: tuple[PreparedWaterway, ...] = ()
    starts: np.ndarray = field(default_factory=_empty_segments)
    ends: np.ndarray = field(default_factory=_empty_segments)
    owners: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=np.intp))

    @classmethod
    def build(cls, waterways: Iterable[PreparedWaterway]) -> "WaterwayIndex":
        waterways = tuple(waterways)
        if not waterways:
            return cls()

        starts, ends, owners = [], [], []
        for position, waterway in enumerate(waterways):
            part_starts, part_ends = segment_endpoints(waterway.parts)
            starts.append(part_starts)
            ends.append(part_ends)
            owners.append(np.full(len(part_starts), position, dtype=np.intp))

        return cls(
            waterways=waterways,
            starts=np.concatenate(starts),
            ends=np.concatenate(ends),
            owners=np.concatenate(owners),
        )

    def __len__(self) -> int:
        return len(self.waterways)

    def __iter__(self) -> Iterator[PreparedWaterway]:
        return iter(self.waterways)

    def distances(self, point: GeoPoint) -> np.ndarray:
        """Distance in metres from a point to every stacked segment."""
        return distance_to_segments(point, self.starts, self.ends)


def prepare_waterways(
    waterways: Iterable[WaterwayFeature | PreparedWaterway],
) -> WaterwayIndex:
    """Convert waterway geometries for distance queries, skipping malformed ones.

    Entries that are already prepared are kept as they are.

    Args:
        waterways: Waterway features from the hydrology feed

    Returns:
        Index over the prepared waterways in input order, without the
        malformed features
    """
    prepared = []
    for feature in waterways:
        if isinstance(feature, PreparedWaterway):
            prepared.append(feature)
            continue
        try:
            parts = line_parts(feature.geometry)
        except MalformedGeometryError as e:
            logger.warning(f"Skipping waterway {getattr(feature, 'id', '?')}: {e}")
            continue
        prepared.append(PreparedWaterway(feature=feature, parts=parts))

    return WaterwayIndex.build(prepared)


def nearest_waterway(
    point: GeoPoint, waterways: WaterwayIndex | Iterable[WaterwayFeature | PreparedWaterway]
) -> tuple[WaterwayFeature, float] | None:
    """Find the waterway closest to a point.

    Args:
        point: Query point
        waterways: Waterway index, or waterways to prepare

    Returns:
        Tuple of (feature, distance in metres), or None if there are no
        waterways. On equal distances the earlier feature wins.
    """
    index = _ensure_index(waterways)
    if not index:
        return None

    distances = index.distances(point)
    # argmin returns the first minimum and segments are stacked in feature order
    segment = int(np.argmin(distances))
    return index.waterways[index.owners[segment]].feature, float(distances[segment])


def is_near_waterway(
    point: GeoPoint,
    waterways: WaterwayIndex | Iterable[WaterwayFeature | PreparedWaterway],
    threshold_m: float,
) -> bool:
    """Check whether a point lies strictly closer than threshold_m to any waterway."""
    index = _ensure_index(waterways)
    if not index:
        return False
    return bool(index.distances(point).min() < threshold_m)


def nearest_waterways(
    issues: Iterable[IssueRecord],
    waterways: WaterwayIndex | Iterable[WaterwayFeature | PreparedWaterway],
) -> dict[str, NearestWaterwayResult]:
    """Compute the nearest waterway and its distance for every issue.

    Args:
        issues: Issues to annotate
        waterways: Waterway features, or an index from prepare_waterways()

    Returns:
        Mapping of issue ID to result. Issues are omitted when no waterway
        geometry is computable; the mapping is empty for empty input.
    """
    index = _ensure_index(waterways)
    results: dict[str, NearestWaterwayResult] = {}
    if not index:
        return results

    for issue in issues:
        try:
            found = nearest_waterway(issue.location, index)
        except MalformedGeometryError as e:
            logger.warning(f"Skipping issue {issue.id}: {e}")
            continue
        if found is None:
            continue
        feature, distance_m = found
        results[issue.id] = NearestWaterwayResult(
            issue_id=issue.id,
            waterway_id=feature.id,
            waterway_name=feature.name,
            distance_feet=metres_to_feet(distance_m),
        )

    logger.debug(f"Located nearest waterway for {len(results)} issues")

    return results


def _ensure_index(
    waterways: WaterwayIndex | Iterable[WaterwayFeature | PreparedWaterway],
) -> WaterwayIndex:
    if isinstance(waterways, WaterwayIndex):
        return waterways
    return prepare_waterways(waterways)
