"""Issue-list services for task queue and summary views."""

from triage.services.stats import IssueStats, issue_stats
from triage.services.work_queue import (
    IssueFilters,
    annotate_distances,
    build_work_queue,
    filter_issues,
    format_distance,
    sort_issues,
)

__all__ = [
    "IssueFilters",
    "annotate_distances",
    "build_work_queue",
    "filter_issues",
    "format_distance",
    "sort_issues",
    "IssueStats",
    "issue_stats",
]
