"""Input adapters for issue and waterway feeds.

The maintenance and hydrology services publish their layers as GeoJSON
FeatureCollections; field data may also arrive as shapefiles or
GeoPackages. Both routes end in the same per-feature parsers, which turn
each feature into a typed model or a ValidationError. A feature that cannot
be parsed is reported and skipped; it never aborts the batch.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import geopandas as gpd
from pydantic import ValidationError as PydanticValidationError
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString, Point, shape
from shapely.geometry.base import BaseGeometry

from triage.config import CONSTANTS
from triage.models.domain import UNNAMED_WATERWAY, IssueRecord, WaterwayFeature
from triage.models.geometry import GeoLineString, GeoMultiLine, GeoPoint
from triage.spatial.utils import ensure_crs
from triage.validation.errors import MalformedGeometryError, ValidationError
from triage.validation.geometry import ISSUE_GEOMETRY_TYPES, WATERWAY_GEOMETRY_TYPES, LayerValidator

logger = logging.getLogger(__name__)

_PARSE_ERRORS = (ValueError, TypeError, KeyError, AttributeError, ShapelyError)


def features_from_collection(collection: Mapping[str, Any] | list) -> list[Mapping[str, Any]]:
    """Extract the features of a GeoJSON FeatureCollection (or pass a list through).

    Raises:
        ValueError: If the input is neither a FeatureCollection nor a list
    """
    if isinstance(collection, list):
        return collection
    if collection.get("type") != "FeatureCollection":
        msg = f"Expected a GeoJSON FeatureCollection, got type={collection.get('type')!r}"
        raise ValueError(msg)
    return list(collection.get("features") or [])


def line_geometry_from_shapely(geom: BaseGeometry) -> GeoLineString | GeoMultiLine:
    """Convert a shapely line geometry to a waterway geometry model.

    Raises:
        MalformedGeometryError: If the geometry is empty or not a line type
        pydantic.ValidationError: If coordinates are out of range or non-finite
    """
    if geom is None or geom.is_empty:
        msg = "Geometry is empty"
        raise MalformedGeometryError(msg)
    if isinstance(geom, LineString):
        return GeoLineString.from_lonlat(geom.coords)
    if isinstance(geom, MultiLineString):
        return GeoMultiLine.from_lonlat(line.coords for line in geom.geoms)

    msg = f"Unsupported waterway geometry type: {geom.geom_type}"
    raise MalformedGeometryError(msg)


def point_from_shapely(geom: BaseGeometry) -> GeoPoint:
    """Convert a shapely point to a GeoPoint.

    Raises:
        MalformedGeometryError: If the geometry is empty or not a point
    """
    if geom is None or geom.is_empty:
        msg = "Geometry is empty"
        raise MalformedGeometryError(msg)
    if not isinstance(geom, Point):
        msg = f"Unsupported issue geometry type: {geom.geom_type}"
        raise MalformedGeometryError(msg)
    return GeoPoint(lat=geom.y, lon=geom.x)


def issue_from_feature(feature: Mapping[str, Any]) -> IssueRecord:
    """Parse one GeoJSON-like issue feature.

    Accepts snake_case or camelCase property names. Missing severity,
    category and status default to "medium", "unknown" and "reported".
    """
    props = dict(feature.get("properties") or {})
    issue_id = _prop(props, "id")
    if issue_id is None:
        issue_id = feature.get("id")

    return IssueRecord(
        id=_text(issue_id),
        location=point_from_shapely(_shape(feature)),
        severity=_text(_prop(props, "severity")) or "medium",
        category=_text(_prop(props, "category")) or "unknown",
        status=_text(_prop(props, "status")) or "reported",
        reported_at=_prop(props, "reported_at", "reportedAt"),
        title=_text(_prop(props, "title")) or "",
        trail_id=_text(_prop(props, "trail_id", "trailId")),
        park_id=_text(_prop(props, "park_id", "parkId")),
        assigned_to=_text(_prop(props, "assigned_to", "assignedTo")),
        resolved_at=_prop(props, "resolved_at", "resolvedAt"),
    )


def waterway_from_feature(feature: Mapping[str, Any]) -> WaterwayFeature:
    """Parse one GeoJSON-like waterway feature."""
    props = dict(feature.get("properties") or {})
    waterway_id = _prop(props, "id")
    if waterway_id is None:
        waterway_id = feature.get("id")

    return WaterwayFeature(
        id=_text(waterway_id),
        name=_text(_prop(props, "name")) or UNNAMED_WATERWAY,
        geometry=line_geometry_from_shapely(_shape(feature)),
        waterway_type=_text(_prop(props, "waterway_type", "type")),
        watershed=_text(_prop(props, "watershed")),
    )


def issues_from_features(
    features: Iterable[Mapping[str, Any]],
) -> tuple[list[IssueRecord], list[ValidationError]]:
    """Parse issue features, collecting errors for the ones that fail.

    Returns:
        Tuple of (parsed issues in input order, validation errors)
    """
    return _parse_all(features, issue_from_feature, "issue")


def waterways_from_features(
    features: Iterable[Mapping[str, Any]],
) -> tuple[list[WaterwayFeature], list[ValidationError]]:
    """Parse waterway features, collecting errors for the ones that fail.

    Returns:
        Tuple of (parsed waterways in input order, validation errors)
    """
    return _parse_all(features, waterway_from_feature, "waterway")


def read_layer(path: Path, validator: LayerValidator) -> gpd.GeoDataFrame:
    """Read a vector file and bring it to WGS84.

    Layer-level problems found by the validator are logged as warnings. A
    layer without a CRS is assumed to be WGS84 already.

    Args:
        path: Path to a GeoJSON, shapefile, GeoPackage or other OGR source
        validator: Layer checks to run before conversion

    Returns:
        GeoDataFrame in EPSG:4326
    """
    gdf = gpd.read_file(path)

    for error in validator.validate(gdf):
        logger.warning(f"{path.name}: {error.message}")

    if gdf.crs is None:
        logger.warning(f"{path.name}: no CRS defined, assuming {CONSTANTS.CRS_WGS84}")
        gdf = gdf.set_crs(CONSTANTS.CRS_WGS84)

    return ensure_crs(gdf, target_crs=CONSTANTS.CRS_WGS84)


def read_issues(path: Path) -> tuple[list[IssueRecord], list[ValidationError]]:
    """Read issue points from a vector file."""
    gdf = read_layer(path, LayerValidator(ISSUE_GEOMETRY_TYPES))
    return issues_from_features(gdf.iterfeatures(na="drop"))


def read_waterways(path: Path) -> tuple[list[WaterwayFeature], list[ValidationError]]:
    """Read waterway lines from a vector file."""
    gdf = read_layer(path, LayerValidator(WATERWAY_GEOMETRY_TYPES))
    return waterways_from_features(gdf.iterfeatures(na="drop"))


def _parse_all(features, parser, kind: str) -> tuple[list, list[ValidationError]]:
    records = []
    errors: list[ValidationError] = []

    for index, feature in enumerate(features):
        try:
            records.append(parser(feature))
        except _PARSE_ERRORS as e:
            feature_id = _feature_id(feature, index)
            logger.warning(f"Skipping {kind} feature {feature_id}: {_describe(e)}")
            errors.append(
                ValidationError(message=_describe(e), field="feature", feature_id=feature_id)
            )

    logger.info(f"Parsed {len(records)} {kind} features ({len(errors)} skipped)")

    return records, errors


def _shape(feature: Mapping[str, Any]) -> BaseGeometry:
    geometry = feature.get("geometry")
    if not geometry:
        msg = "Feature has no geometry"
        raise MalformedGeometryError(msg)
    if isinstance(geometry, BaseGeometry):
        return geometry
    return shape(geometry)


def _prop(props: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if props.get(name) is not None:
            return props[name]
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _feature_id(feature: Any, index: int) -> str:
    if isinstance(feature, Mapping):
        props = feature.get("properties") or {}
        found = props.get("id") if isinstance(props, Mapping) else None
        if found is None:
            found = feature.get("id")
        if found is not None:
            return str(found)
    return f"#{index}"


def _describe(error: Exception) -> str:
    if isinstance(error, PydanticValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in error.errors()
        )
    return str(error)
