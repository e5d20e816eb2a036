"""Validation of the scoring configuration and of its fit to the survey table.

Both checks run before aggregation. They raise instead of truncating or
guessing so that a run either produces a complete result or none at all:

- ``validate_survey_config``: structural rules on the configuration alone
- ``validate_survey_shape``: the survey header must cover every question
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Sequence

from resilience.assessments.constants import (
    HEADER_ROW_INDEX,
    LIKERT_MAX_SCORE,
    SHEET_COLORS,
    SHEET_LIKERT_MAPPING,
    SHEET_QUESTION_MAPPING,
    SHEET_SETTINGS,
)
from resilience.assessments.rag.enums import Dimension
from resilience.assessments.rag.types import SurveyConfig
from resilience.core.errors import SurveyConfigError, SurveyShapeError

__all__ = [
    "validate_survey_config",
    "validate_survey_shape",
]


def validate_survey_config(config: SurveyConfig) -> None:
    """Validate the structural rules of a scoring configuration.

    Raises:
        SurveyConfigError: naming the offending section when the start column
            is not a non-negative integer, the Likert mapping is empty or
            holds a score outside ``[0, 5]``, no question is declared, or a
            question carries an unknown dimension.

    Example:
        >>> validate_survey_config(SurveyConfig.build(start_column=-1, likert_map={"Agree": 4}, questions=[("Learn", "x")]))
        Traceback (most recent call last):
        ...
        resilience.core.errors.SurveyConfigError: Start column must be a non-negative integer, got -1
    """
    start = config.start_column
    if isinstance(start, bool) or not isinstance(start, int) or start < 0:
        raise SurveyConfigError(
            f"Start column must be a non-negative integer, got {start!r}",
            section=SHEET_SETTINGS,
        )

    if len(config.likert_map) == 0:
        raise SurveyConfigError(
            "No valid Likert mappings found. Each entry needs answer text and a numeric score.",
            section=SHEET_LIKERT_MAPPING,
        )
    for text, score in config.likert_map:
        if not text:
            raise SurveyConfigError("Likert mapping contains a blank answer text", section=SHEET_LIKERT_MAPPING)
        if isinstance(score, bool) or not isinstance(score, Real) or not 0 <= score <= LIKERT_MAX_SCORE:
            raise SurveyConfigError(
                f"Score for '{text}' must be a number in [0, {LIKERT_MAX_SCORE}], got {score!r}",
                section=SHEET_LIKERT_MAPPING,
                detail={
                    "answer": text,
                    "score": score,
                    "allowed_range": [0, LIKERT_MAX_SCORE],
                    "reason": f"Dimension scores compare against a polygon of radius {LIKERT_MAX_SCORE}; "
                    "rescale other Likert scales into this range.",
                },
            )

    if not config.questions:
        raise SurveyConfigError("No questions found.", section=SHEET_QUESTION_MAPPING)
    for position, question in enumerate(config.questions, start=1):
        if not isinstance(question.dimension, Dimension):
            allowed = ", ".join(member.value for member in Dimension)
            raise SurveyConfigError(
                f"Question {position}: invalid dimension '{question.dimension}'. Allowed: {allowed}.",
                section=SHEET_QUESTION_MAPPING,
                detail={"question": position},
            )

    if config.colors is not None:
        unknown = [key for key in config.colors if not isinstance(key, Dimension)]
        if unknown:
            raise SurveyConfigError(
                f"Unknown dimensions in colour table: {unknown}",
                section=SHEET_COLORS,
            )


def validate_survey_shape(rows: Sequence[Sequence[Any]], config: SurveyConfig) -> None:
    """Ensure the survey header has a column for every declared question.

    Raises:
        SurveyShapeError: when the survey has no data row, the start column is
            beyond the header, or the questions run past the last column.
    """
    if not rows or len(rows) < HEADER_ROW_INDEX + 2:
        raise SurveyShapeError(
            "Survey data appears to be empty or contains only a header row.",
            detail={"rows": len(rows) if rows else 0},
        )

    header_width = len(rows[HEADER_ROW_INDEX] or ())
    question_count = len(config.questions)
    if config.start_column >= header_width:
        raise SurveyShapeError(
            f"Start column is set to {config.start_column}, but the survey only has {header_width} columns.",
            detail={"start_column": config.start_column, "columns": header_width},
        )
    if config.end_column > header_width:
        raise SurveyShapeError(
            f"Configuration expects {question_count} questions starting at column {config.start_column} "
            f"(requires {config.end_column} columns), but the survey only has {header_width} columns.",
            detail={
                "start_column": config.start_column,
                "questions": question_count,
                "required_columns": config.end_column,
                "columns": header_width,
            },
        )
