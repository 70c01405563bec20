"""Scoring calculators for priority zones.

This package contains pure functions for scoring grid cells and turning raw
scores into ranked zones. All calculators are stateless.
"""

from triage.calculators.cell_scores import CellProfile, profile_cell, raw_score, severity_score
from triage.calculators.normalization import classify, normalize_scores, rank_zones

__all__ = [
    "CellProfile",
    "profile_cell",
    "raw_score",
    "severity_score",
    "normalize_scores",
    "classify",
    "rank_zones",
]
