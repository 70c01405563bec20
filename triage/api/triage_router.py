"""Triage endpoints.

Every request carries its own issue and waterway FeatureCollections and is
computed from scratch; the server keeps no cache between requests.

- POST /priority-zones:    Ranked priority zones for a weight configuration
- POST /nearest-waterways: Nearest waterway and distance in feet per issue
- POST /work-queue:        Filtered, distance-sorted task queue
- POST /issue-stats:       Issue counts by status, severity and category
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from triage.config import CriteriaWeights, PriorityConfig
from triage.engine import compute_nearest_waterways, compute_priority_zones
from triage.inputs.features import (
    features_from_collection,
    issues_from_features,
    waterways_from_features,
)
from triage.models.domain import IssueRecord, NearestWaterwayResult, PriorityZone, WaterwayFeature
from triage.models.enums import SortMode
from triage.models.geometry import GeoPoint
from triage.services.stats import IssueStats, issue_stats
from triage.services.work_queue import IssueFilters, build_work_queue, format_distance

logger = logging.getLogger(__name__)

router = APIRouter()


def _empty_collection() -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": []}


def get_priority_config() -> PriorityConfig:
    """Priority configuration from PRIORITY_* environment variables."""
    return PriorityConfig()


class SkippedFeature(BaseModel):
    """A feature that was rejected while parsing the request."""

    layer: str
    feature_id: str | None = None
    message: str


class IssuesRequest(BaseModel):
    """Request body carrying issues only."""

    issues: dict[str, Any] = Field(
        ..., description="GeoJSON FeatureCollection of issue points"
    )


class ZonesRequest(IssuesRequest):
    """Request body for the priority zone endpoint."""

    waterways: dict[str, Any] = Field(
        default_factory=_empty_collection,
        description="GeoJSON FeatureCollection of waterway lines",
    )
    weights: CriteriaWeights | None = Field(
        default=None, description="Criteria weights (default: configured weights)"
    )


class NearestRequest(IssuesRequest):
    """Request body for the nearest waterway endpoint."""

    waterways: dict[str, Any] = Field(
        ..., description="GeoJSON FeatureCollection of waterway lines"
    )


class WorkQueueRequest(IssuesRequest):
    """Request body for the work queue endpoint."""

    reference: GeoPoint | None = Field(default=None, description="Crew location")
    sort_mode: SortMode | None = Field(
        default=None, description="proximity, severity or date"
    )
    filters: IssueFilters | None = None


class ZonesResponse(BaseModel):
    zones: list[PriorityZone]
    skipped: list[SkippedFeature]


class NearestResponse(BaseModel):
    results: dict[str, NearestWaterwayResult]
    skipped: list[SkippedFeature]


class WorkQueueItem(BaseModel):
    issue: IssueRecord
    distance_miles: float | None
    distance_label: str | None


class WorkQueueResponse(BaseModel):
    queue: list[WorkQueueItem]
    skipped: list[SkippedFeature]


class IssueStatsResponse(BaseModel):
    stats: IssueStats
    skipped: list[SkippedFeature]


@router.post("/priority-zones", response_model=ZonesResponse)
def priority_zones(
    request: ZonesRequest, config: PriorityConfig = Depends(get_priority_config)
):
    """Rank priority zones for the supplied issues, waterways and weights."""
    skipped: list[SkippedFeature] = []
    issues = _parse(request.issues, issues_from_features, "issues", skipped)
    waterways = _parse(request.waterways, waterways_from_features, "waterways", skipped)

    zones = compute_priority_zones(issues, waterways, request.weights, config)
    logger.info(f"Computed {len(zones)} priority zones from {len(issues)} issues")

    return ZonesResponse(zones=zones, skipped=skipped)


@router.post("/nearest-waterways", response_model=NearestResponse)
def nearest_waterways(request: NearestRequest):
    """Find the nearest waterway to every issue."""
    skipped: list[SkippedFeature] = []
    issues = _parse(request.issues, issues_from_features, "issues", skipped)
    waterways: list[WaterwayFeature] = _parse(
        request.waterways, waterways_from_features, "waterways", skipped
    )

    return NearestResponse(results=compute_nearest_waterways(issues, waterways), skipped=skipped)


@router.post("/work-queue", response_model=WorkQueueResponse)
def work_queue(request: WorkQueueRequest):
    """Build a filtered, sorted task queue."""
    skipped: list[SkippedFeature] = []
    issues = _parse(request.issues, issues_from_features, "issues", skipped)

    queue = build_work_queue(issues, request.reference, request.sort_mode, request.filters)

    return WorkQueueResponse(
        queue=[
            WorkQueueItem(
                issue=item.issue,
                distance_miles=item.distance_miles,
                distance_label=(
                    format_distance(item.distance_miles)
                    if item.distance_miles is not None
                    else None
                ),
            )
            for item in queue
        ],
        skipped=skipped,
    )


@router.post("/issue-stats", response_model=IssueStatsResponse)
def stats(request: IssuesRequest):
    """Count issues by status, severity and category."""
    skipped: list[SkippedFeature] = []
    issues = _parse(request.issues, issues_from_features, "issues", skipped)

    return IssueStatsResponse(stats=issue_stats(issues), skipped=skipped)


def _parse(
    collection: dict[str, Any],
    parser: Callable,
    layer: str,
    skipped: list[SkippedFeature],
) -> list:
    try:
        features = features_from_collection(collection)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=f"{layer}: {e}") from e

    records, errors = parser(features)
    skipped.extend(
        SkippedFeature(layer=layer, feature_id=error.feature_id, message=error.message)
        for error in errors
    )
    return records
