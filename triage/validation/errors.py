"""Validation error definitions."""

from dataclasses import dataclass


@dataclass
class ValidationError:
    """Represents a validation error with descriptive message."""

    message: str
    field: str | None = None
    feature_id: str | None = None


class MalformedGeometryError(ValueError):
    """Raised when a geometry has unusable coordinates.

    Batch operations catch this per feature, log it, and carry on with the
    remaining features.
    """
