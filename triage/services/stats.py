"""Aggregate issue statistics for summary views."""

from collections.abc import Iterable

import pandas as pd
from pydantic import BaseModel, ConfigDict

from triage.models.domain import IssueRecord
from triage.models.enums import IssueStatus, Severity


class IssueStats(BaseModel):
    """Issue counts for a summary panel.

    Attributes:
        total: Number of issues
        by_status: Count per status (every status present, zero filled)
        by_severity: Count per known severity (every severity present, zero filled)
        by_category: Count per category present in the data
    """

    model_config = ConfigDict(frozen=True)

    total: int
    by_status: dict[str, int]
    by_severity: dict[str, int]
    by_category: dict[str, int]


def issues_frame(issues: Iterable[IssueRecord]) -> pd.DataFrame:
    """Tabulate issues (without geometry) for aggregation."""
    return pd.DataFrame(
        [
            {
                "id": issue.id,
                "status": str(issue.status),
                "severity": str(issue.severity),
                "category": issue.category,
                "reported_at": issue.reported_at,
            }
            for issue in issues
        ],
        columns=["id", "status", "severity", "category", "reported_at"],
    )


def issue_stats(issues: Iterable[IssueRecord]) -> IssueStats:
    """Count issues by status, severity and category.

    Unrecognised severities are counted in the total but not in by_severity.
    """
    df = issues_frame(issues)

    by_status = df["status"].value_counts().reindex([s.value for s in IssueStatus], fill_value=0)
    by_severity = (
        df["severity"].value_counts().reindex([s.value for s in Severity], fill_value=0)
    )
    by_category = df["category"].value_counts().sort_index()

    return IssueStats(
        total=len(df),
        by_status={key: int(count) for key, count in by_status.items()},
        by_severity={key: int(count) for key, count in by_severity.items()},
        by_category={key: int(count) for key, count in by_category.items()},
    )
