"""Centralized constants for resilience score calculations.

This module consolidates the fixed numbers of the Resilience Analysis Grid
(RAG) scoring model. Tunable presentation parameters (status bands, level
labels, default colours) live in ``resilience/assessments/rag/config.yaml``;
the values here are part of the scoring contract and are not configurable.

All constants are immutable (Final) to prevent accidental modification.
"""

from __future__ import annotations

from typing import Final, Tuple

__all__ = [
    "LIKERT_MAX_SCORE",
    "MIN_POLYGON_VERTICES",
    "AVERAGE_DECIMALS",
    "HEADER_ROW_INDEX",
    "SHEET_SETTINGS",
    "SHEET_LIKERT_MAPPING",
    "SHEET_QUESTION_MAPPING",
    "SHEET_COLORS",
    "REQUIRED_SHEETS",
]

# =============================================================================
# Scoring
# =============================================================================

LIKERT_MAX_SCORE: Final[int] = 5
"""Radius of every vertex of the reference (maximum) polygon."""

MIN_POLYGON_VERTICES: Final[int] = 3
"""A dimension with fewer questions encloses no area and scores 0."""

AVERAGE_DECIMALS: Final[int] = 2
"""Question averages are rounded before they become polygon radii."""

# =============================================================================
# Tabular input layout
# =============================================================================

HEADER_ROW_INDEX: Final[int] = 0
"""Row 0 of every sheet is a header and never carries answers."""

SHEET_SETTINGS: Final[str] = "Settings"
SHEET_LIKERT_MAPPING: Final[str] = "Likert_Mapping"
SHEET_QUESTION_MAPPING: Final[str] = "Question_Mapping"
SHEET_COLORS: Final[str] = "Colors"

REQUIRED_SHEETS: Final[Tuple[str, str, str]] = (
    SHEET_SETTINGS,
    SHEET_LIKERT_MAPPING,
    SHEET_QUESTION_MAPPING,
)
