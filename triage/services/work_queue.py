"""Work queue ordering and filtering for field crews.

Issues are decorated with their great-circle distance from a reference
point (usually the crew's location) and sorted by one of several
interchangeable strategies. Distances come from the same haversine
primitive the priority pipeline uses, converted to miles here.
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from triage.models.domain import IssueRecord, RankedIssue
from triage.models.enums import IssueStatus, Severity, SortMode
from triage.models.geometry import GeoPoint
from triage.spatial.distance import haversine_distance, metres_to_miles

logger = logging.getLogger(__name__)

SEVERITY_ORDER: dict[str, int] = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}

FEET_PER_MILE = 5280


class IssueFilters(BaseModel):
    """Work queue filters. Unset filters match everything.

    Attributes:
        statuses: Keep only these statuses
        open_only: Drop resolved issues
        severities: Keep only these severities
        categories: Keep only these categories
        months: Keep issues reported in these months (1-12), for seasonal drill-down
        trail_id: Keep issues reported against this trail
        park_id: Keep issues reported against this park
        assigned_to: Keep issues assigned to this crew or person
        near: Centre of a radius filter
        radius_miles: Radius around ``near`` in miles
    """

    model_config = ConfigDict(frozen=True)

    statuses: frozenset[IssueStatus] | None = None
    open_only: bool = False
    severities: frozenset[str] | None = None
    categories: frozenset[str] | None = None
    months: frozenset[int] | None = Field(default=None, description="Months 1-12")
    trail_id: str | None = None
    park_id: str | None = None
    assigned_to: str | None = None
    near: GeoPoint | None = None
    radius_miles: float | None = Field(default=None, ge=0)


def distance_miles(reference: GeoPoint, point: GeoPoint) -> float:
    """Great-circle distance in miles between a reference point and a point."""
    return metres_to_miles(haversine_distance(reference, point))


def annotate_distances(
    issues: Iterable[IssueRecord], reference: GeoPoint | None
) -> list[RankedIssue]:
    """Attach the distance from the reference point to every issue.

    Args:
        issues: Issues to decorate
        reference: Reference point, or None when the crew location is unknown

    Returns:
        RankedIssue list in input order; distances are None without a reference
    """
    return [
        RankedIssue(
            issue=issue,
            distance_miles=distance_miles(reference, issue.location) if reference else None,
        )
        for issue in issues
    ]


def _proximity_key(ranked: RankedIssue) -> tuple[int, float]:
    # Issues without a distance sink to the end in input order
    if ranked.distance_miles is None:
        return (1, 0.0)
    return (0, ranked.distance_miles)


def _severity_key(ranked: RankedIssue) -> int:
    return SEVERITY_ORDER.get(ranked.issue.severity, len(SEVERITY_ORDER))


def _recency_key(ranked: RankedIssue) -> float:
    # Newest first
    return -ranked.issue.reported_at.timestamp()


SORT_STRATEGIES: dict[SortMode, Callable[[RankedIssue], object]] = {
    SortMode.PROXIMITY: _proximity_key,
    SortMode.SEVERITY: _severity_key,
    SortMode.DATE: _recency_key,
}


def sort_issues(ranked: Iterable[RankedIssue], mode: SortMode) -> list[RankedIssue]:
    """Sort decorated issues with the selected strategy (stable)."""
    return sorted(ranked, key=SORT_STRATEGIES[SortMode(mode)])


def matches_filters(issue: IssueRecord, filters: IssueFilters) -> bool:
    """Check one issue against the work queue filters."""
    if filters.statuses is not None and issue.status not in filters.statuses:
        return False
    if filters.open_only and not issue.is_open():
        return False
    if filters.severities is not None and issue.severity not in filters.severities:
        return False
    if filters.categories is not None and issue.category not in filters.categories:
        return False
    if filters.months is not None and issue.reported_at.month not in filters.months:
        return False
    if filters.trail_id and issue.trail_id != filters.trail_id:
        return False
    if filters.park_id and issue.park_id != filters.park_id:
        return False
    if filters.assigned_to and issue.assigned_to != filters.assigned_to:
        return False
    if filters.near is not None and filters.radius_miles is not None:
        if distance_miles(filters.near, issue.location) > filters.radius_miles:
            return False
    return True


def filter_issues(issues: Iterable[IssueRecord], filters: IssueFilters) -> list[IssueRecord]:
    """Return the issues matching every filter, in input order."""
    return [issue for issue in issues if matches_filters(issue, filters)]


def build_work_queue(
    issues: Iterable[IssueRecord],
    reference: GeoPoint | None = None,
    sort_mode: SortMode | None = None,
    filters: IssueFilters | None = None,
) -> list[RankedIssue]:
    """Filter, decorate and sort issues for a task queue view.

    Args:
        issues: Issues from the maintenance feed
        reference: Crew location used for distances, if known
        sort_mode: Ordering strategy. Defaults to proximity when a reference
            point is given, otherwise severity.
        filters: Optional filters applied before sorting

    Returns:
        Sorted, distance-annotated issues
    """
    if sort_mode is None:
        sort_mode = SortMode.PROXIMITY if reference is not None else SortMode.SEVERITY

    selected = filter_issues(issues, filters) if filters is not None else list(issues)
    queue = sort_issues(annotate_distances(selected, reference), sort_mode)

    logger.debug(f"Built work queue of {len(queue)} issues sorted by {sort_mode}")

    return queue


def format_distance(miles: float) -> str:
    """Format a distance for display: feet under 0.1 mi, otherwise tenths of a mile."""
    if miles < 0.1:
        return f"{round(miles * FEET_PER_MILE)} ft"
    return f"{miles:.1f} mi"
