"""Core domain models for maintenance triage.

These models represent the inputs supplied by the maintenance and waterway
feeds and the outputs consumed by rendering and reporting layers, as
immutable value objects. None of them carry identity across runs: every
change to the data or the weights produces fresh results.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from triage.models.enums import IssueStatus, PriorityLabel, Severity
from triage.models.geometry import GeoPoint, LineGeometry

UNNAMED_WATERWAY = "Unnamed waterway"


class IssueRecord(BaseModel):
    """Snapshot of a reported maintenance issue.

    Owned by the external maintenance store; the engine never mutates it.

    Attributes:
        id: Issue ID from the maintenance store
        location: Reported position
        severity: Reported severity. Known values are coerced to Severity;
            anything else is kept as a plain string and scored fail-soft.
        category: Issue category (e.g. "erosion", "graffiti")
        status: Workflow status
        reported_at: When the issue was reported
        title: Short description
        trail_id: Trail the issue was reported against, if any
        park_id: Park the issue was reported against, if any
        assigned_to: Crew or person the issue is assigned to
        resolved_at: When the issue was resolved, if it has been
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Issue ID")
    location: GeoPoint = Field(description="Reported position (WGS84)")
    severity: Severity | str = Field(description="Reported severity")
    category: str = Field(description="Issue category")
    status: IssueStatus = Field(default=IssueStatus.REPORTED, description="Workflow status")
    reported_at: datetime = Field(description="Report timestamp")
    title: str = Field(default="", description="Short description")
    trail_id: str | None = Field(default=None, description="Related trail ID")
    park_id: str | None = Field(default=None, description="Related park ID")
    assigned_to: str | None = Field(default=None, description="Assignee")
    resolved_at: datetime | None = Field(default=None, description="Resolution timestamp")

    @field_validator("severity", mode="before")
    @classmethod
    def coerce_known_severity(cls, value):
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in Severity._value2member_map_:
                return Severity(normalized)
        return value

    def is_open(self) -> bool:
        """Check whether the issue still needs attention."""
        return self.status != IssueStatus.RESOLVED


class WaterwayFeature(BaseModel):
    """A linear hydrological feature (river, creek, canal, gulch).

    Attributes:
        id: Waterway ID
        name: Display name
        geometry: Single or multi-part line geometry
        waterway_type: Feature type from the hydrology source (river, creek...)
        watershed: Watershed the feature drains to
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Waterway ID")
    name: str = Field(default=UNNAMED_WATERWAY, description="Display name")
    geometry: LineGeometry = Field(description="Line or multi-line geometry")
    waterway_type: str | None = Field(default=None, description="Waterway type")
    watershed: str | None = Field(default=None, description="Watershed name")


class CriteriaScores(BaseModel):
    """The four per-cell sub-scores, each in [0, 1].

    Attributes:
        density: min(issue_count / density_saturation, 1)
        water: 1.0 if the cell centre is near a waterway, else 0.0
        severity: Mean severity score of the cell's issues
        recurrence: min(distinct_categories / recurrence_saturation, 1)
    """

    model_config = ConfigDict(frozen=True)

    density: float = Field(ge=0, le=1)
    water: float = Field(ge=0, le=1)
    severity: float = Field(ge=0, le=1)
    recurrence: float = Field(ge=0, le=1)


class PriorityZone(BaseModel):
    """A ranked maintenance zone produced by one scoring run.

    Attributes:
        center: Grid cell centre
        raw_score: Weighted sum of the sub-scores
        normalized_score: raw_score relative to the run's maximum, in [0, 1]
        issue_count: Number of issues in the cell
        critical_or_high_count: Issues with critical or high severity
        near_water: Whether the cell centre lies near a waterway
        distinct_categories: Categories present, in first-seen order
        label: Batch-relative priority label
        criteria: Sub-scores behind raw_score
    """

    model_config = ConfigDict(frozen=True)

    center: GeoPoint
    raw_score: float
    normalized_score: float = Field(ge=0, le=1)
    issue_count: int = Field(gt=0)
    critical_or_high_count: int = Field(ge=0)
    near_water: bool
    distinct_categories: tuple[str, ...]
    label: PriorityLabel
    criteria: CriteriaScores


class NearestWaterwayResult(BaseModel):
    """Nearest waterway to one issue.

    Attributes:
        issue_id: Issue the result belongs to
        waterway_id: ID of the nearest waterway
        waterway_name: Name of the nearest waterway
        distance_feet: Distance from the issue to the waterway line (feet)
    """

    model_config = ConfigDict(frozen=True)

    issue_id: str
    waterway_id: str
    waterway_name: str
    distance_feet: float = Field(ge=0)


class RankedIssue(BaseModel):
    """An issue decorated with its distance from a reference point.

    Attributes:
        issue: The underlying issue
        distance_miles: Great-circle distance in miles (None without a reference)
    """

    model_config = ConfigDict(frozen=True)

    issue: IssueRecord
    distance_miles: float | None = Field(default=None, ge=0)
