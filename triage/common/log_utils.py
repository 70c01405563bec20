"""Logging setup for the CLI and the API server."""

import json
import logging
import logging.config
from pathlib import Path

DEFAULT_LOGGING_CONFIG = Path(__file__).parent.parent.parent / "logging.json"


class EndpointFilter(logging.Filter):
    """Filters out log messages for specific endpoints.

    Useful for suppressing uvicorn access logs from health checks.

    Args:
        path: The endpoint path to filter (e.g., "/health")
    """

    def __init__(self, path: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._path = path

    def filter(self, record: logging.LogRecord) -> bool:
        return record.getMessage().find(self._path) == -1


def configure_logging(config_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure logging from a dictConfig JSON file, or a basic JSON-shaped format.

    Args:
        config_path: dictConfig file (default: logging.json at the repository root)
        level: Root level for the fallback configuration
    """
    config_path = config_path or DEFAULT_LOGGING_CONFIG

    if config_path.exists():
        with open(config_path) as f:
            logging.config.dictConfig(json.load(f))
    else:
        logging.basicConfig(
            level=level,
            format=(
                '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
                '"logger": "%(name)s", "message": "%(message)s"}'
            ),
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
