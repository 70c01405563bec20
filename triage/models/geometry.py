"""Geometry value objects (WGS84 latitude/longitude in degrees).

Geometries form a tagged union discriminated on ``type``, mirroring the
GeoJSON geometry names. Shapes the engine cannot use (polygons, points where a
line is expected, too few vertices, non-finite coordinates) fail validation
here, so loaders can reject them per feature instead of tripping over a
missing field later.
"""

from collections.abc import Iterable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """A single WGS84 position."""

    model_config = ConfigDict(frozen=True)

    type: Literal["Point"] = "Point"
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False, description="Latitude (degrees)")
    lon: float = Field(ge=-180, le=180, allow_inf_nan=False, description="Longitude (degrees)")

    @classmethod
    def from_lonlat(cls, coordinates: Iterable[float]) -> "GeoPoint":
        """Build from a GeoJSON ``[lon, lat]`` position (extra ordinates ignored)."""
        lon, lat, *_ = coordinates
        return cls(lat=lat, lon=lon)


class GeoLineString(BaseModel):
    """One connected linear part with at least two vertices."""

    model_config = ConfigDict(frozen=True)

    type: Literal["LineString"] = "LineString"
    points: tuple[GeoPoint, ...] = Field(min_length=2, description="Ordered vertices")

    @classmethod
    def from_lonlat(cls, coordinates: Iterable[Iterable[float]]) -> "GeoLineString":
        """Build from GeoJSON ``[[lon, lat], ...]`` coordinates."""
        return cls(points=tuple(GeoPoint.from_lonlat(c) for c in coordinates))


class GeoMultiLine(BaseModel):
    """Disconnected linear parts belonging to one logical feature."""

    model_config = ConfigDict(frozen=True)

    type: Literal["MultiLineString"] = "MultiLineString"
    lines: tuple[GeoLineString, ...] = Field(min_length=1, description="Constituent lines")

    @classmethod
    def from_lonlat(cls, coordinates: Iterable[Iterable[Iterable[float]]]) -> "GeoMultiLine":
        """Build from GeoJSON ``[[[lon, lat], ...], ...]`` coordinates."""
        return cls(lines=tuple(GeoLineString.from_lonlat(line) for line in coordinates))


LineGeometry = Annotated[GeoLineString | GeoMultiLine, Field(discriminator="type")]
