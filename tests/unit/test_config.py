"""Unit tests for configuration."""

import math

import pytest
from pydantic import ValidationError


def test_default_priority_config_values():
    """Test default calibration values."""
    from triage.config import DEFAULT_PRIORITY_CONFIG

    assert DEFAULT_PRIORITY_CONFIG.grid_size_m == 200.0
    assert DEFAULT_PRIORITY_CONFIG.water_proximity_m == 150.0
    assert DEFAULT_PRIORITY_CONFIG.density_saturation == 8
    assert DEFAULT_PRIORITY_CONFIG.recurrence_saturation == 4
    assert DEFAULT_PRIORITY_CONFIG.visibility_threshold == 0.1


def test_default_weights():
    """Test default criteria weights sum to 1."""
    from triage.config import DEFAULT_WEIGHTS

    assert DEFAULT_WEIGHTS.issue_density == 0.35
    assert DEFAULT_WEIGHTS.water_proximity == 0.25
    assert DEFAULT_WEIGHTS.severity_factor == 0.25
    assert DEFAULT_WEIGHTS.recurrence == 0.15
    assert sum(DEFAULT_WEIGHTS.model_dump().values()) == pytest.approx(1.0)


def test_environment_overrides(monkeypatch):
    """Test PRIORITY_ environment variables, including nested weights."""
    from triage.config import PriorityConfig

    monkeypatch.setenv("PRIORITY_GRID_SIZE_M", "100")
    monkeypatch.setenv("PRIORITY_WEIGHTS__WATER_PROXIMITY", "0.5")

    config = PriorityConfig()

    assert config.grid_size_m == 100.0
    assert config.weights.water_proximity == 0.5
    assert config.weights.issue_density == 0.35


def test_out_of_range_weights_pass_through():
    """Test weights outside [0, 1] are kept as given."""
    from triage.config import CriteriaWeights

    weights = CriteriaWeights(issue_density=1.5, recurrence=-0.2)

    assert weights.issue_density == 1.5
    assert weights.recurrence == -0.2


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_weights_rejected(value):
    """Test NaN and infinite weights are rejected."""
    from triage.config import CriteriaWeights

    with pytest.raises(ValidationError):
        CriteriaWeights(water_proximity=value)


def test_invalid_grid_size_rejected():
    """Test non-positive grid sizes are rejected."""
    from triage.config import PriorityConfig

    with pytest.raises(ValidationError):
        PriorityConfig(grid_size_m=0)


def test_api_server_config(monkeypatch):
    """Test API server defaults and overrides."""
    from triage.config import ApiServerConfig

    assert ApiServerConfig().port == 8085

    monkeypatch.setenv("API_PORT", "9000")
    assert ApiServerConfig().port == 9000
