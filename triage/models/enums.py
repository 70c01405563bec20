"""Enumerations shared by the triage pipelines."""

from enum import StrEnum


class Severity(StrEnum):
    """Severity reported for a maintenance issue."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueStatus(StrEnum):
    """Workflow status of a maintenance issue."""

    REPORTED = "reported"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class PriorityLabel(StrEnum):
    """Batch-relative priority label for a zone.

    Labels are assigned from the normalized score, so "Critical" means the
    most pressing area in the current dataset, not an absolute emergency.
    """

    CRITICAL = "Critical"
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"


class SortMode(StrEnum):
    """Interchangeable work queue ordering strategies."""

    PROXIMITY = "proximity"
    SEVERITY = "severity"
    DATE = "date"


class DistanceUnit(StrEnum):
    """Units distances may be reported in. Metres are canonical."""

    METRES = "metres"
    FEET = "feet"
    MILES = "miles"
