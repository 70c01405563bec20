"""Per-cell criteria scoring for priority zones.

Each grid cell gets four independent sub-scores in [0, 1]. They depend only
on the cell's issues and the waterway layer, never on the weights, so they
are captured once in a CellProfile and re-weighted cheaply with raw_score()
whenever the weights change.
"""

from pydantic import BaseModel, ConfigDict

from triage.config import DEFAULT_PRIORITY_CONFIG, CriteriaWeights, PriorityConfig
from triage.models.domain import CriteriaScores, IssueRecord
from triage.models.enums import Severity
from triage.models.geometry import GeoPoint
from triage.spatial.grid import GridCell
from triage.spatial.waterways import WaterwayIndex, is_near_waterway

SEVERITY_SCORES: dict[str, float] = {
    Severity.CRITICAL: 1.0,
    Severity.HIGH: 0.75,
    Severity.MEDIUM: 0.4,
    Severity.LOW: 0.15,
}

# Unrecognised severities score as medium
DEFAULT_SEVERITY_SCORE = 0.4

HIGH_SEVERITIES = frozenset({Severity.CRITICAL, Severity.HIGH})


class CellProfile(BaseModel):
    """Weight-independent summary of one grid cell.

    Attributes:
        center: Cell centre
        issue_count: Number of issues in the cell (always > 0)
        critical_or_high_count: Issues with critical or high severity
        near_water: Whether the centre lies near a waterway
        distinct_categories: Categories present, in first-seen order
        criteria: The four sub-scores
    """

    model_config = ConfigDict(frozen=True)

    center: GeoPoint
    issue_count: int
    critical_or_high_count: int
    near_water: bool
    distinct_categories: tuple[str, ...]
    criteria: CriteriaScores


def severity_score(severity: str) -> float:
    """Score a single severity, falling back to the medium score for unknown values."""
    return SEVERITY_SCORES.get(severity, DEFAULT_SEVERITY_SCORE)


def density_score(issue_count: int, saturation: int = 8) -> float:
    """Saturating issue density score: min(issue_count / saturation, 1)."""
    return min(issue_count / saturation, 1.0)


def recurrence_score(distinct_categories: int, saturation: int = 4) -> float:
    """Saturating multi-problem score: min(distinct_categories / saturation, 1)."""
    return min(distinct_categories / saturation, 1.0)


def mean_severity(issues: list[IssueRecord]) -> float:
    """Mean severity score over a non-empty list of issues."""
    return sum(severity_score(issue.severity) for issue in issues) / len(issues)


def profile_cell(
    cell: GridCell,
    waterways: WaterwayIndex,
    config: PriorityConfig = DEFAULT_PRIORITY_CONFIG,
) -> CellProfile:
    """Compute the weight-independent sub-scores of a grid cell.

    Args:
        cell: Grid cell with at least one issue
        waterways: Waterway index from prepare_waterways()
        config: Saturation points and water proximity threshold

    Returns:
        CellProfile for the cell

    Raises:
        ValueError: If the cell has no issues
    """
    if not cell.issues:
        msg = f"Cannot score empty grid cell {cell.key}"
        raise ValueError(msg)

    categories = tuple(dict.fromkeys(issue.category for issue in cell.issues))
    near_water = is_near_waterway(cell.center, waterways, config.water_proximity_m)

    criteria = CriteriaScores(
        density=density_score(len(cell.issues), config.density_saturation),
        water=1.0 if near_water else 0.0,
        severity=mean_severity(cell.issues),
        recurrence=recurrence_score(len(categories), config.recurrence_saturation),
    )

    return CellProfile(
        center=cell.center,
        issue_count=len(cell.issues),
        critical_or_high_count=sum(1 for i in cell.issues if i.severity in HIGH_SEVERITIES),
        near_water=near_water,
        distinct_categories=categories,
        criteria=criteria,
    )


def raw_score(profile: CellProfile, weights: CriteriaWeights) -> float:
    """Combine a cell's sub-scores with the criteria weights.

    Formula:
        raw = density * w.issue_density
            + water * w.water_proximity
            + severity * w.severity_factor
            + recurrence * w.recurrence

    Weights are used as given (not clamped, not required to sum to 1); the
    result only becomes meaningful after batch normalization.
    """
    c = profile.criteria
    return (
        c.density * weights.issue_density
        + c.water * weights.water_proximity
        + c.severity * weights.severity_factor
        + c.recurrence * weights.recurrence
    )
