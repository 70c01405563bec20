"""Command-line interface for maintenance triage.

Usage:
    triage zones data/issues.geojson --waterways data/waterways.geojson
    triage zones data/issues.geojson --waterways data/waterways.gpkg --water 0.5
    triage nearest data/issues.geojson data/waterways.geojson
    triage queue data/issues.geojson --lat 38.93 --lon -77.03 --open-only
    triage stats data/issues.geojson
    triage serve --port 8085

Results are printed to stdout as JSON; logs go to stderr.
"""

import json
import logging
from pathlib import Path
from typing import Any

import typer
import uvicorn

from triage.common.log_utils import configure_logging
from triage.config import ApiServerConfig, CriteriaWeights, PriorityConfig
from triage.engine import compute_nearest_waterways, compute_priority_zones
from triage.inputs.features import read_issues, read_waterways
from triage.models.enums import IssueStatus, SortMode
from triage.models.geometry import GeoPoint
from triage.services.stats import issue_stats
from triage.services.work_queue import IssueFilters, build_work_queue, format_distance

logger = logging.getLogger(__name__)

app = typer.Typer(help="Trail maintenance triage: priority zones, waterways and work queues")

ISSUES_ARG = typer.Argument(
    ...,
    exists=True,
    dir_okay=False,
    help="Issue points (GeoJSON, shapefile, GeoPackage)",
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    configure_logging()
    if verbose:
        logging.getLogger("triage").setLevel(logging.DEBUG)


@app.command()
def zones(
    issues_path: Path = ISSUES_ARG,
    waterways_path: Path | None = typer.Option(
        None, "--waterways", "-w", exists=True, dir_okay=False, help="Waterway lines"
    ),
    density: float | None = typer.Option(None, help="Issue density weight"),
    water: float | None = typer.Option(None, help="Water proximity weight"),
    severity: float | None = typer.Option(None, help="Severity weight"),
    recurrence: float | None = typer.Option(None, help="Recurrence weight"),
    grid_size: float | None = typer.Option(None, help="Grid cell edge in metres"),
) -> None:
    """Rank priority zones."""
    config = PriorityConfig()
    if grid_size is not None:
        config = PriorityConfig(**{**config.model_dump(), "grid_size_m": grid_size})

    weights = _weights(config.weights, density, water, severity, recurrence)
    issues, _ = read_issues(issues_path)
    waterways = read_waterways(waterways_path)[0] if waterways_path else []

    result = compute_priority_zones(issues, waterways, weights, config)
    logger.info(f"{len(result)} priority zones from {len(issues)} issues")

    _echo_json([zone.model_dump(mode="json") for zone in result])


@app.command()
def nearest(
    issues_path: Path = ISSUES_ARG,
    waterways_path: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Waterway lines"
    ),
) -> None:
    """Find the nearest waterway to each issue, in feet."""
    issues, _ = read_issues(issues_path)
    waterways, _ = read_waterways(waterways_path)

    result = compute_nearest_waterways(issues, waterways)

    _echo_json({issue_id: item.model_dump(mode="json") for issue_id, item in result.items()})


@app.command()
def queue(
    issues_path: Path = ISSUES_ARG,
    lat: float | None = typer.Option(None, help="Crew latitude"),
    lon: float | None = typer.Option(None, help="Crew longitude"),
    sort: SortMode | None = typer.Option(None, help="Sort mode"),
    status: list[IssueStatus] | None = typer.Option(None, help="Keep these statuses"),
    open_only: bool = typer.Option(False, "--open-only", help="Drop resolved issues"),
    severity: list[str] | None = typer.Option(None, help="Keep these severities"),
    category: list[str] | None = typer.Option(None, help="Keep these categories"),
    month: list[int] | None = typer.Option(None, help="Keep issues reported in these months"),
    trail: str | None = typer.Option(None, help="Trail ID"),
    park: str | None = typer.Option(None, help="Park ID"),
    assignee: str | None = typer.Option(None, help="Assigned crew or person"),
    radius: float | None = typer.Option(None, help="Radius around --lat/--lon in miles"),
) -> None:
    """Print a filtered, sorted task queue."""
    if (lat is None) != (lon is None):
        typer.echo("Error: --lat and --lon must be given together", err=True)
        raise typer.Exit(1)

    reference = GeoPoint(lat=lat, lon=lon) if lat is not None else None
    if radius is not None and reference is None:
        typer.echo("Error: --radius needs --lat and --lon", err=True)
        raise typer.Exit(1)

    filters = IssueFilters(
        statuses=frozenset(status) if status else None,
        open_only=open_only,
        severities=frozenset(severity) if severity else None,
        categories=frozenset(category) if category else None,
        months=frozenset(month) if month else None,
        trail_id=trail,
        park_id=park,
        assigned_to=assignee,
        near=reference if radius is not None else None,
        radius_miles=radius,
    )

    issues, _ = read_issues(issues_path)
    result = build_work_queue(issues, reference, sort, filters)

    _echo_json(
        [
            {
                **item.model_dump(mode="json"),
                "distance_label": (
                    format_distance(item.distance_miles)
                    if item.distance_miles is not None
                    else None
                ),
            }
            for item in result
        ]
    )


@app.command()
def stats(issues_path: Path = ISSUES_ARG) -> None:
    """Count issues by status, severity and category."""
    issues, _ = read_issues(issues_path)
    _echo_json(issue_stats(issues).model_dump(mode="json"))


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Interface (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    config = ApiServerConfig()
    uvicorn.run(
        "triage.api:app",
        host=host or config.host,
        port=port or config.port,
        log_config=None,
    )


def _weights(
    base: CriteriaWeights,
    density: float | None,
    water: float | None,
    severity: float | None,
    recurrence: float | None,
) -> CriteriaWeights:
    overrides = {
        "issue_density": density,
        "water_proximity": water,
        "severity_factor": severity,
        "recurrence": recurrence,
    }
    return CriteriaWeights(
        **{**base.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
    )


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
