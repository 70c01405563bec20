"""Configuration and constants for the maintenance triage engine.

This module defines the calibration constants and tunable settings used by
the priority-zone and nearest-waterway pipelines.

Includes configuration for:
- Priority zone scoring (PriorityConfig with PRIORITY_ prefix)
- Criteria weights (CriteriaWeights, nested under PriorityConfig)
- HTTP API server (ApiServerConfig with API_ prefix)

Configuration can be overridden via:
1. Environment variables (e.g., PRIORITY_GRID_SIZE_M=250, PRIORITY_WEIGHTS__RECURRENCE=0.3)
2. .env file in the current directory
3. Default values in code
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical constants and unit conversion factors.

    These are NOT configurable. Every distance in the engine is computed in
    metres against EARTH_RADIUS_M and converted to feet or miles only at the
    output boundary.
    """

    CRS_WGS84: str = "EPSG:4326"

    # Mean Earth radius for great-circle distance
    EARTH_RADIUS_M: float = 6_371_000.0

    # Equirectangular approximation: 1 degree of latitude (and of longitude at
    # the equator). Deliberately not latitude-corrected for grid cells.
    METRES_PER_DEGREE: float = 111_320.0

    METRES_PER_FOOT: float = 0.3048
    METRES_PER_MILE: float = 1_609.344


# Module-level singleton for physical constants
CONSTANTS = PhysicalConstants()


class CriteriaWeights(BaseModel):
    """Weights for the four priority criteria.

    Weights need not sum to 1: zone scores are scaled against the batch
    maximum, not a fixed total. Values outside [0, 1] are passed through
    unchanged rather than clamped; callers wanting stricter behaviour should
    validate upstream.

    Attributes:
        issue_density: Weight for issue clustering within a cell
        water_proximity: Weight for a cell centre lying near a waterway
        severity_factor: Weight for the mean severity of the cell's issues
        recurrence: Weight for the number of distinct issue categories
    """

    model_config = ConfigDict(frozen=True)

    issue_density: float = Field(default=0.35, allow_inf_nan=False)
    water_proximity: float = Field(default=0.25, allow_inf_nan=False)
    severity_factor: float = Field(default=0.25, allow_inf_nan=False)
    recurrence: float = Field(default=0.15, allow_inf_nan=False)


DEFAULT_WEIGHTS = CriteriaWeights()


class PriorityConfig(BaseSettings):
    """Calibration settings for priority zone computation.

    Can be overridden via environment variables with PRIORITY_ prefix:
    - PRIORITY_GRID_SIZE_M
    - PRIORITY_WATER_PROXIMITY_M
    - PRIORITY_DENSITY_SATURATION
    - PRIORITY_RECURRENCE_SATURATION
    - PRIORITY_VISIBILITY_THRESHOLD
    - PRIORITY_WEIGHTS__ISSUE_DENSITY (and the other three weights)

    Attributes:
        grid_size_m: Grid cell edge length in metres
        water_proximity_m: A cell centre closer than this to a waterway scores 1.0
        density_saturation: Issue count at which the density score saturates
        recurrence_saturation: Distinct category count at which recurrence saturates
        visibility_threshold: Zones at or below this normalized score are hidden
        weights: Default criteria weights
    """

    model_config = SettingsConfigDict(
        env_prefix="PRIORITY_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    grid_size_m: float = Field(default=200.0, gt=0, description="Grid cell edge (metres)")
    water_proximity_m: float = Field(
        default=150.0, ge=0, description="Waterway proximity threshold (metres)"
    )
    density_saturation: int = Field(
        default=8, gt=0, description="Issues per cell at which density saturates"
    )
    recurrence_saturation: int = Field(
        default=4, gt=0, description="Distinct categories at which recurrence saturates"
    )
    visibility_threshold: float = Field(
        default=0.1, ge=0, le=1, description="Normalized score at or below which zones are hidden"
    )
    weights: CriteriaWeights = Field(
        default_factory=CriteriaWeights, description="Default criteria weights"
    )


DEFAULT_PRIORITY_CONFIG = PriorityConfig()


class ApiServerConfig(BaseSettings):
    """Configuration for the HTTP API server.

    Can be overridden via environment variables with API_ prefix:
    - API_HOST (default: 0.0.0.0)
    - API_PORT (default: 8085)
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Interface for the API server")
    port: int = Field(default=8085, ge=1, le=65535, description="Port for the API server")
