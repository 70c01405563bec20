"""Batch-relative normalization and classification of priority zones.

Scores are normalized against the highest raw score in the current run, not
an absolute scale. A "Critical" zone therefore answers "where, among the
issues in front of me right now, should crews focus first?" rather than "is
this an absolute emergency?". In a calm dataset the top zone is still
labelled Critical. This is intentional for triage and should not be
replaced with absolute thresholds without product sign-off.
"""

import logging
from collections.abc import Sequence

from triage.calculators.cell_scores import CellProfile, raw_score
from triage.config import CriteriaWeights
from triage.models.domain import PriorityZone
from triage.models.enums import PriorityLabel

logger = logging.getLogger(__name__)

# Lower bounds (exclusive) for each label, highest first
LABEL_THRESHOLDS: tuple[tuple[float, PriorityLabel], ...] = (
    (0.7, PriorityLabel.CRITICAL),
    (0.4, PriorityLabel.HIGH),
    (0.2, PriorityLabel.MODERATE),
)

DEFAULT_VISIBILITY_THRESHOLD = 0.1


def normalize_scores(raw_scores: Sequence[float]) -> list[float]:
    """Scale raw scores by the batch maximum into [0, 1].

    If the maximum is zero (or negative, only reachable with negative
    weights) every normalized score is 0. Individual negative raw scores
    clamp to 0.

    Args:
        raw_scores: Raw scores from one scoring run

    Returns:
        Normalized scores in the same order
    """
    if not raw_scores:
        return []

    max_score = max(raw_scores)
    if max_score <= 0:
        return [0.0] * len(raw_scores)

    return [max(score / max_score, 0.0) for score in raw_scores]


def classify(normalized_score: float) -> PriorityLabel:
    """Assign a priority label to a normalized score."""
    for threshold, label in LABEL_THRESHOLDS:
        if normalized_score > threshold:
            return label
    return PriorityLabel.LOW


def rank_zones(
    profiles: Sequence[CellProfile],
    weights: CriteriaWeights,
    visibility_threshold: float = DEFAULT_VISIBILITY_THRESHOLD,
) -> list[PriorityZone]:
    """Weight, normalize, label, filter and order cell profiles.

    Args:
        profiles: Cell profiles from one run
        weights: Criteria weights
        visibility_threshold: Zones with normalized score at or below this are
            dropped as noise

    Returns:
        Visible zones ordered by normalized score, highest first. Ties keep
        the order of the input profiles.
    """
    raw_scores = [raw_score(profile, weights) for profile in profiles]
    normalized = normalize_scores(raw_scores)

    zones = [
        PriorityZone(
            center=profile.center,
            raw_score=raw,
            normalized_score=score,
            issue_count=profile.issue_count,
            critical_or_high_count=profile.critical_or_high_count,
            near_water=profile.near_water,
            distinct_categories=profile.distinct_categories,
            label=classify(score),
            criteria=profile.criteria,
        )
        for profile, raw, score in zip(profiles, raw_scores, normalized, strict=True)
        if score > visibility_threshold
    ]

    zones.sort(key=lambda zone: zone.normalized_score, reverse=True)

    logger.debug(f"Ranked {len(zones)} visible zones out of {len(profiles)} cells")

    return zones
