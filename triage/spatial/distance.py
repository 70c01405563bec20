"""Great-circle distance primitives.

Every distance in the engine is computed in metres by the single haversine
formula in this module, on a sphere of radius CONSTANTS.EARTH_RADIUS_M.
Callers that report feet (nearest waterway) or miles (work queue) convert
the metre value at their own boundary with the helpers below.

Point-to-line distances use a local equirectangular projection centred on
the query point to find the closest location on each segment, then measure
the distance to that location with haversine. At district scale the
projection error is negligible, and a point lying on a segment measures 0.
"""

import math

import numpy as np

from triage.config import CONSTANTS
from triage.models.enums import DistanceUnit
from triage.models.geometry import GeoLineString, GeoMultiLine, GeoPoint
from triage.validation.errors import MalformedGeometryError

# Metres spanned by one degree of arc on the haversine sphere
_METRES_PER_RADIAN_DEGREE = math.radians(1.0) * CONSTANTS.EARTH_RADIUS_M

# Keeps the projection finite at the poles
_MIN_COS_LAT = 1e-12


def _haversine_m(lat1, lon1, lat2, lon2):
    """Haversine distance in metres between degree coordinates.

    Accepts scalars or numpy arrays (broadcast against each other).
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = np.radians(np.subtract(lon2, lon1))
    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2 * CONSTANTS.EARTH_RADIUS_M * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def haversine_distance(a: GeoPoint, b: GeoPoint) -> float:
    """Return the great-circle distance in metres between two points."""
    _check_point(a)
    _check_point(b)
    return float(_haversine_m(a.lat, a.lon, b.lat, b.lon))


def point_to_segment_distance(point: GeoPoint, seg_start: GeoPoint, seg_end: GeoPoint) -> float:
    """Return the distance in metres from a point to a finite segment.

    Measures to the closest location anywhere on the segment, not only its
    endpoints.

    Raises:
        MalformedGeometryError: If any coordinate is missing or non-finite
    """
    coords = _coordinates((seg_start, seg_end))
    return float(distance_to_segments(point, coords[:-1], coords[1:])[0])


def point_to_line_distance(point: GeoPoint, geometry: GeoLineString | GeoMultiLine) -> float:
    """Return the distance in metres from a point to a line or multi-line.

    Every segment of every constituent line is evaluated and the global
    minimum returned.

    Raises:
        MalformedGeometryError: If the geometry is not a usable line
    """
    return distance_to_parts(point, line_parts(geometry))


def line_parts(geometry: GeoLineString | GeoMultiLine) -> list[np.ndarray]:
    """Convert a line geometry to one ``(n, 2)`` [lat, lon] array per part.

    Raises:
        MalformedGeometryError: If the geometry is not a line type, a part has
            fewer than two vertices, or a coordinate is non-finite
    """
    if isinstance(geometry, GeoLineString):
        return [_coordinates(geometry.points)]

    if isinstance(geometry, GeoMultiLine):
        if not geometry.lines:
            msg = "MultiLineString has no parts"
            raise MalformedGeometryError(msg)
        return [_coordinates(getattr(line, "points", ())) for line in geometry.lines]

    msg = f"Unsupported geometry type: {type(geometry).__name__}"
    raise MalformedGeometryError(msg)


def segment_endpoints(parts: list[np.ndarray]) -> tuple[np.ndarray, np.ndarray]:
    """Stack the segments of prepared line parts into start and end arrays.

    Returns:
        Tuple of (starts, ends), each ``(m, 2)`` [lat, lon], one row per
        segment in part order
    """
    if not parts:
        return np.empty((0, 2)), np.empty((0, 2))
    starts = np.concatenate([coords[:-1] for coords in parts])
    ends = np.concatenate([coords[1:] for coords in parts])
    return starts, ends


def distance_to_parts(point: GeoPoint, parts: list[np.ndarray]) -> float:
    """Return the minimum distance in metres from a point to prepared line parts."""
    if not parts:
        msg = "Line geometry has no parts"
        raise MalformedGeometryError(msg)
    starts, ends = segment_endpoints(parts)
    return float(distance_to_segments(point, starts, ends).min())


def distance_to_segments(point: GeoPoint, starts: np.ndarray, ends: np.ndarray) -> np.ndarray:
    """Return the distance in metres from a point to each of many segments.

    All segments are evaluated in one vectorised pass, so a whole waterway
    layer costs a single call per query point.

    Args:
        point: Query point
        starts: ``(m, 2)`` [lat, lon] segment start coordinates
        ends: ``(m, 2)`` [lat, lon] segment end coordinates

    Returns:
        Array of m distances, in segment order

    Raises:
        MalformedGeometryError: If the point is missing or non-finite
    """
    _check_point(point)
    lat, lon = point.lat, point.lon
    cos_lat = max(math.cos(math.radians(lat)), _MIN_COS_LAT)
    x_scale = _METRES_PER_RADIAN_DEGREE * cos_lat

    # Project endpoints onto a plane centred on the query point (origin)
    ay = (starts[:, 0] - lat) * _METRES_PER_RADIAN_DEGREE
    ax = _wrap_longitude(starts[:, 1] - lon) * x_scale
    dy = (ends[:, 0] - lat) * _METRES_PER_RADIAN_DEGREE - ay
    dx = _wrap_longitude(ends[:, 1] - lon) * x_scale - ax
    length_sq = dx * dx + dy * dy

    # Parameter of the origin's projection onto each segment, clamped to it
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(length_sq > 0, -(ax * dx + ay * dy) / length_sq, 0.0)
    t = np.clip(t, 0.0, 1.0)

    closest_lat = lat + (ay + t * dy) / _METRES_PER_RADIAN_DEGREE
    closest_lon = lon + (ax + t * dx) / x_scale

    return _haversine_m(lat, lon, closest_lat, closest_lon)


def metres_to_feet(metres: float) -> float:
    """Convert metres to feet."""
    return metres / CONSTANTS.METRES_PER_FOOT


def metres_to_miles(metres: float) -> float:
    """Convert metres to statute miles."""
    return metres / CONSTANTS.METRES_PER_MILE


def convert_distance(metres: float, unit: DistanceUnit) -> float:
    """Convert a canonical metre distance to the requested unit."""
    if unit == DistanceUnit.METRES:
        return metres
    if unit == DistanceUnit.FEET:
        return metres_to_feet(metres)
    if unit == DistanceUnit.MILES:
        return metres_to_miles(metres)

    msg = f"Unsupported distance unit: {unit}"
    raise ValueError(msg)


def _check_point(point: GeoPoint) -> None:
    lat = getattr(point, "lat", None)
    lon = getattr(point, "lon", None)
    if not isinstance(lat, int | float) or not isinstance(lon, int | float):
        msg = f"Point has missing coordinates: {point!r}"
        raise MalformedGeometryError(msg)
    if not (math.isfinite(lat) and math.isfinite(lon)):
        msg = f"Point has non-finite coordinates: ({lat}, {lon})"
        raise MalformedGeometryError(msg)


def _coordinates(points) -> np.ndarray:
    """Stack points into a finite ``(n, 2)`` [lat, lon] array with n >= 2."""
    try:
        coords = np.array([(p.lat, p.lon) for p in points], dtype=float)
    except (AttributeError, TypeError, ValueError) as e:
        msg = f"Line has unreadable coordinates: {e}"
        raise MalformedGeometryError(msg) from e

    if len(coords) < 2:
        msg = f"Line needs at least 2 points, got {len(coords)}"
        raise MalformedGeometryError(msg)

    if not np.isfinite(coords).all():
        msg = "Line has non-finite coordinates"
        raise MalformedGeometryError(msg)

    return coords


def _wrap_longitude(dlon: np.ndarray) -> np.ndarray:
    """Fold longitude differences into [-180, 180)."""
    return (dlon + 180.0) % 360.0 - 180.0
