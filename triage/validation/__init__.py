"""Validation for input layers and features.

Layer-level checks (CRS, geometry types, null geometries) live in
LayerValidator; per-feature problems are reported as ValidationError by the
input adapters.
"""

from triage.validation.errors import MalformedGeometryError, ValidationError
from triage.validation.geometry import (
    ISSUE_GEOMETRY_TYPES,
    WATERWAY_GEOMETRY_TYPES,
    LayerValidator,
)

__all__ = [
    "ValidationError",
    "MalformedGeometryError",
    "LayerValidator",
    "ISSUE_GEOMETRY_TYPES",
    "WATERWAY_GEOMETRY_TYPES",
]
