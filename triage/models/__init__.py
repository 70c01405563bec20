"""Domain models for maintenance triage."""

from triage.models.domain import (
    CriteriaScores,
    IssueRecord,
    NearestWaterwayResult,
    PriorityZone,
    RankedIssue,
    WaterwayFeature,
)
from triage.models.enums import DistanceUnit, IssueStatus, PriorityLabel, Severity, SortMode
from triage.models.geometry import GeoLineString, GeoMultiLine, GeoPoint

__all__ = [
    "GeoPoint",
    "GeoLineString",
    "GeoMultiLine",
    "IssueRecord",
    "WaterwayFeature",
    "CriteriaScores",
    "PriorityZone",
    "NearestWaterwayResult",
    "RankedIssue",
    "Severity",
    "IssueStatus",
    "PriorityLabel",
    "SortMode",
    "DistanceUnit",
]
