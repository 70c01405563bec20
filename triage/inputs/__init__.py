"""Input adapters turning GeoJSON features and vector files into models."""

from triage.inputs.features import (
    features_from_collection,
    issue_from_feature,
    issues_from_features,
    read_issues,
    read_waterways,
    waterway_from_feature,
    waterways_from_features,
)

__all__ = [
    "features_from_collection",
    "issue_from_feature",
    "issues_from_features",
    "read_issues",
    "read_waterways",
    "waterway_from_feature",
    "waterways_from_features",
]
