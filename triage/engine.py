"""Priority zone and nearest waterway pipelines.

Two independent pipelines share the distance primitives:

    issues, weights   -> grid -> cell profiles -> normalize -> ranked zones
    issues, waterways -> nearest waterway per issue

compute_priority_zones() and compute_nearest_waterways() are pure: every
call takes its full input and returns fresh results. PriorityEngine wraps
them with an explicit memo owned by the caller, so that a weight change
re-runs only the cheap weighting and normalization step rather than the
grid rebuild, the waterway proximity tests and the nearest waterway scan.
"""

import hashlib
import logging
from collections.abc import Iterable, Sequence

from triage.calculators.cell_scores import CellProfile, profile_cell
from triage.calculators.normalization import rank_zones
from triage.config import DEFAULT_PRIORITY_CONFIG, CriteriaWeights, PriorityConfig
from triage.models.domain import IssueRecord, NearestWaterwayResult, PriorityZone, WaterwayFeature
from triage.spatial.grid import aggregate_issues
from triage.spatial.waterways import nearest_waterways, prepare_waterways

logger = logging.getLogger(__name__)


def build_cell_profiles(
    issues: Iterable[IssueRecord],
    waterways: Iterable[WaterwayFeature],
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> list[CellProfile]:
    """Run the weight-independent stages: grid aggregation and cell profiling.

    Args:
        issues: Issues from the maintenance feed
        waterways: Waterway features; malformed ones are skipped
        config: Grid size, saturation points and water threshold

    Returns:
        One profile per non-empty cell, in first-seen order
    """
    cells = aggregate_issues(issues, config.grid_size_m)
    if not cells:
        return []

    prepared = prepare_waterways(waterways)
    return [profile_cell(cell, prepared, config) for cell in cells]


def compute_priority_zones(
    issues: Iterable[IssueRecord],
    waterways: Iterable[WaterwayFeature],
    weights: CriteriaWeights | None = None,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> list[PriorityZone]:
    """Compute ranked priority zones from scratch.

    Args:
        issues: Issues from the maintenance feed
        waterways: Waterway features
        weights: Criteria weights (default: config.weights)
        config: Priority configuration

    Returns:
        Visible zones ordered by normalized score, highest first. Empty when
        there are no issues or every weight is zero.
    """
    weights = weights if weights is not None else config.weights
    profiles = build_cell_profiles(issues, waterways, config)
    return rank_zones(profiles, weights, config.visibility_threshold)


def compute_nearest_waterways(
    issues: Iterable[IssueRecord],
    waterways: Iterable[WaterwayFeature],
) -> dict[str, NearestWaterwayResult]:
    """Compute the nearest waterway for every issue from scratch."""
    return nearest_waterways(issues, waterways)


def dataset_fingerprint(
    issues: Sequence[IssueRecord], waterways: Sequence[WaterwayFeature]
) -> str:
    """Stable SHA-256 fingerprint of an ordered issue set and waterway set."""
    digest = hashlib.sha256()
    for label, records in (("issues", issues), ("waterways", waterways)):
        digest.update(f"{label}:{len(records)}\n".encode())
        for record in records:
            digest.update(record.model_dump_json().encode("utf-8"))
            digest.update(b"\n")
    return digest.hexdigest()


class PriorityEngine:
    """Caching front end for the two pipelines.

    The memo is instance state with a single slot per pipeline: the most
    recent cell profiles and the most recent nearest waterway map. Each slot
    is keyed by the dataset fingerprint (or a caller-supplied dataset
    version) and is replaced as soon as the issue or waterway set changes.
    Weights are never part of the key.

    Example:
        engine = PriorityEngine()
        zones = engine.priority_zones(issues, waterways, weights)
        # Slider moved: only weighting and normalization re-run
        zones = engine.priority_zones(issues, waterways, new_weights)
    """

    def __init__(self, config: PriorityConfig = DEFAULT_PRIORITY_CONFIG):
        """Initialize the engine.

        Args:
            config: Priority configuration used for every run of this engine
        """
        self.config = config
        self._profiles: tuple[str, list[CellProfile]] | None = None
        self._nearest: tuple[str, dict[str, NearestWaterwayResult]] | None = None

    def priority_zones(
        self,
        issues: Iterable[IssueRecord],
        waterways: Iterable[WaterwayFeature],
        weights: CriteriaWeights | None = None,
        dataset_version: str | None = None,
    ) -> list[PriorityZone]:
        """Rank priority zones, reusing cell profiles while the data is unchanged.

        Args:
            issues: Issues from the maintenance feed
            waterways: Waterway features
            weights: Criteria weights (default: the engine config's weights)
            dataset_version: Optional caller-managed version of the
                (issues, waterways) pair, used instead of hashing them

        Returns:
            Fresh list of visible zones, highest score first
        """
        issues, waterways = list(issues), list(waterways)
        key = self._key(issues, waterways, dataset_version)

        if self._profiles is None or self._profiles[0] != key:
            logger.debug("Cell profiles stale, rebuilding grid")
            self._profiles = (key, build_cell_profiles(issues, waterways, self.config))

        weights = weights if weights is not None else self.config.weights
        return rank_zones(self._profiles[1], weights, self.config.visibility_threshold)

    def nearest_waterways(
        self,
        issues: Iterable[IssueRecord],
        waterways: Iterable[WaterwayFeature],
        dataset_version: str | None = None,
    ) -> dict[str, NearestWaterwayResult]:
        """Nearest waterway per issue, recomputed only when the data changes.

        Returns:
            Fresh mapping of issue ID to result
        """
        issues, waterways = list(issues), list(waterways)
        key = self._key(issues, waterways, dataset_version)

        if self._nearest is None or self._nearest[0] != key:
            logger.debug("Nearest waterway map stale, rescanning")
            self._nearest = (key, compute_nearest_waterways(issues, waterways))

        return dict(self._nearest[1])

    def clear(self) -> None:
        """Drop every memoized result."""
        self._profiles = None
        self._nearest = None

    def _key(
        self,
        issues: list[IssueRecord],
        waterways: list[WaterwayFeature],
        dataset_version: str | None,
    ) -> str:
        data_key = dataset_version or dataset_fingerprint(issues, waterways)
        spatial = self.config.model_dump_json(exclude={"weights"})
        return f"{data_key}|{spatial}"
