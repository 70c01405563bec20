"""Maintenance triage engine.

Ranks trail maintenance hot-spots (priority zones), finds the nearest
waterway to each reported issue, and orders issues into field work queues.
"""

from triage.engine import (
    PriorityEngine,
    compute_nearest_waterways,
    compute_priority_zones,
)

__all__ = [
    "PriorityEngine",
    "compute_nearest_waterways",
    "compute_priority_zones",
]
