"""Layer-level checks for issue and waterway vector files."""

import geopandas as gpd

from triage.validation.errors import ValidationError

ISSUE_GEOMETRY_TYPES = frozenset({"Point"})
WATERWAY_GEOMETRY_TYPES = frozenset({"LineString", "MultiLineString"})


class LayerValidator:
    """Validates a layer read from a GeoJSON, shapefile or GeoPackage.

    Checks:
    - Geometry column present
    - Valid CRS
    - Geometry types are the expected ones
    - No null or empty geometries

    Findings are layer-level summaries. Individual features are still parsed
    and rejected one by one by the input adapters.
    """

    def __init__(self, valid_geom_types: frozenset[str]):
        """Initialize the validator.

        Args:
            valid_geom_types: Geometry type names accepted for this layer
        """
        self.valid_geom_types = frozenset(valid_geom_types)

    def validate(self, gdf: gpd.GeoDataFrame) -> list[ValidationError]:
        """Validate a GeoDataFrame.

        Args:
            gdf: GeoDataFrame loaded from file

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if "geometry" not in gdf.columns:
            errors.append(
                ValidationError(message="Layer missing 'geometry' column", field="geometry")
            )
            return errors

        if gdf.crs is None:
            errors.append(ValidationError(message="Layer has no defined CRS", field="crs"))

        geometry = gdf.geometry
        present = geometry[~geometry.isna()]

        geom_types = set(present.geom_type.dropna().unique())
        invalid_types = geom_types - self.valid_geom_types
        if invalid_types:
            errors.append(
                ValidationError(
                    message=f"Unexpected geometry types found: {', '.join(sorted(invalid_types))}. "
                    f"Expected: {' or '.join(sorted(self.valid_geom_types))}",
                    field="geometry",
                )
            )

        null_count = int(geometry.isna().sum())
        if null_count > 0:
            errors.append(
                ValidationError(message=f"Found {null_count} null geometries", field="geometry")
            )

        empty_count = int(present.is_empty.sum())
        if empty_count > 0:
            errors.append(
                ValidationError(message=f"Found {empty_count} empty geometries", field="geometry")
            )

        return errors
