"""Unit tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from triage.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    """Keep dictConfig handlers out of the captured output."""
    mocker.patch("triage.cli.configure_logging")


@pytest.fixture
def data_files(tmp_path, cell_centre, collection, issue_feature, waterway_feature):
    lat, lon = cell_centre
    issues_path = tmp_path / "issues.geojson"
    issues_path.write_text(
        json.dumps(
            collection(
                [
                    issue_feature("I-1", lon=lon, lat=lat, severity="critical"),
                    issue_feature("I-2", lon=lon, lat=lat, severity="critical"),
                    issue_feature("I-3", lon=lon, lat=lat + 0.05, status="resolved"),
                ]
            )
        )
    )
    waterways_path = tmp_path / "waterways.geojson"
    waterways_path.write_text(
        json.dumps(
            collection(
                [
                    waterway_feature(
                        "W-1", coords=((lon + 0.0003, lat - 0.01), (lon + 0.0003, lat + 0.01))
                    )
                ]
            )
        )
    )
    return issues_path, waterways_path


def test_zones(data_files):
    issues_path, waterways_path = data_files

    result = runner.invoke(app, ["zones", str(issues_path), "--waterways", str(waterways_path)])

    assert result.exit_code == 0, result.output
    zones = json.loads(result.stdout)
    assert zones[0]["label"] == "Critical"
    assert zones[0]["issue_count"] == 2
    assert zones[0]["near_water"] is True


def test_zones_weight_override(data_files):
    issues_path, waterways_path = data_files

    result = runner.invoke(
        app,
        [
            "zones",
            str(issues_path),
            "--waterways",
            str(waterways_path),
            "--density",
            "0",
            "--water",
            "1",
            "--severity",
            "0",
            "--recurrence",
            "0",
        ],
    )

    assert result.exit_code == 0, result.output
    assert [z["issue_count"] for z in json.loads(result.stdout)] == [2]


def test_nearest(data_files):
    issues_path, waterways_path = data_files

    result = runner.invoke(app, ["nearest", str(issues_path), str(waterways_path)])

    assert result.exit_code == 0, result.output
    assert set(json.loads(result.stdout)) == {"I-1", "I-2", "I-3"}


def test_queue(data_files, cell_centre):
    issues_path, _ = data_files
    lat, lon = cell_centre

    result = runner.invoke(
        app, ["queue", str(issues_path), "--lat", str(lat), "--lon", str(lon), "--open-only"]
    )

    assert result.exit_code == 0, result.output
    queue = json.loads(result.stdout)
    assert [item["issue"]["id"] for item in queue] == ["I-1", "I-2"]
    assert queue[0]["distance_label"].endswith(" ft")


def test_queue_requires_both_coordinates(data_files):
    issues_path, _ = data_files

    result = runner.invoke(app, ["queue", str(issues_path), "--lat", "39.6"])

    assert result.exit_code == 1


def test_stats(data_files):
    issues_path, _ = data_files

    result = runner.invoke(app, ["stats", str(issues_path)])

    assert result.exit_code == 0, result.output
    stats = json.loads(result.stdout)
    assert stats["total"] == 3
    assert stats["by_status"]["resolved"] == 1
    assert stats["by_severity"]["critical"] == 2


def test_missing_file(tmp_path):
    result = runner.invoke(app, ["stats", str(tmp_path / "nope.geojson")])

    assert result.exit_code != 0
