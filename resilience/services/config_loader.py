from __future__ import annotations

import re
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from resilience.assessments.constants import (
    HEADER_ROW_INDEX,
    REQUIRED_SHEETS,
    SHEET_COLORS,
    SHEET_LIKERT_MAPPING,
    SHEET_QUESTION_MAPPING,
    SHEET_SETTINGS,
)
from resilience.assessments.rag.calculations import cell_text, is_blank_cell
from resilience.assessments.rag.enums import Dimension
from resilience.assessments.rag.logic import is_empty_row
from resilience.assessments.rag.types import LikertMapping, QuestionMapping, SurveyConfig
from resilience.assessments.validators import validate_survey_config
from resilience.core.errors import SurveyConfigError
from resilience.core.logging import get_logger
from resilience.core.metrics import timeit
from resilience.core.numeric import is_integral

logger = get_logger("resilience.services.config_loader", component="services")

Rows = Sequence[Sequence[Any]]

_START_LABEL = re.compile(r"(start|起始|begin)", re.IGNORECASE)
_SHORT_INTEGER = re.compile(r"\s*(\d{1,4})\s*")
_DIMENSION_HEADERS = ("potential", "dimension")
_FOCUS_HEADER = "focus"

__all__ = [
    "load_survey_config",
    "parse_start_column",
    "parse_likert_mapping",
    "parse_questions",
    "parse_colors",
]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _as_score(value: Any) -> Optional[float]:
    if _is_number(value):
        number = float(value)
    else:
        text = cell_text(value)
        if text is None or not text.strip():
            return None
        try:
            number = float(text.strip())
        except ValueError:
            return None
    return int(number) if is_integral(number) else number


def parse_start_column(rows: Rows) -> int:
    """Find the start column on the settings sheet.

    The value sits on the first row carrying a ``start``/``begin``/``起始``
    label: the first numeric cell of that row, else the first short integer
    text cell.
    """
    for row in rows:
        if not any(_START_LABEL.search(cell_text(cell) or "") for cell in row):
            continue
        for cell in row:
            if _is_number(cell) and is_integral(cell):
                return int(cell)
        for cell in row:
            match = _SHORT_INTEGER.fullmatch(cell_text(cell) or "")
            if match:
                return int(match.group(1))
        break
    raise SurveyConfigError(
        "Could not locate a valid 'Start Column' value. It must be a number.",
        section=SHEET_SETTINGS,
    )


def parse_likert_mapping(rows: Rows) -> LikertMapping:
    pairs: List[Tuple[str, float]] = []
    for row in rows[HEADER_ROW_INDEX + 1 :]:
        if len(row) < 2 or is_blank_cell(row[0]):
            continue
        score = _as_score(row[1])
        if score is None:
            continue
        pairs.append((cell_text(row[0]).strip(), score))
    if not pairs:
        raise SurveyConfigError(
            "No valid mappings found. Format: Column A (Text) -> Column B (Number).",
            section=SHEET_LIKERT_MAPPING,
        )
    return LikertMapping.from_pairs(pairs)


def _header_index(header: Sequence[Any], names: Sequence[str]) -> Optional[int]:
    for index, cell in enumerate(header):
        if (cell_text(cell) or "").strip().lower() in names:
            return index
    return None


def parse_questions(rows: Rows) -> Tuple[QuestionMapping, ...]:
    """Read ``(dimension, focus)`` pairs, one per survey question, in order."""
    if not rows or len(rows) <= HEADER_ROW_INDEX + 1:
        raise SurveyConfigError("No questions found.", section=SHEET_QUESTION_MAPPING)

    header = rows[HEADER_ROW_INDEX]
    dimension_col = _header_index(header, _DIMENSION_HEADERS)
    focus_col = _header_index(header, (_FOCUS_HEADER,))
    if dimension_col is None or focus_col is None:
        raise SurveyConfigError(
            "Missing 'Potential' or 'Focus' column in the header row.",
            section=SHEET_QUESTION_MAPPING,
            detail={"row": HEADER_ROW_INDEX + 1},
        )

    questions: List[QuestionMapping] = []
    for offset, row in enumerate(rows[HEADER_ROW_INDEX + 1 :]):
        if is_empty_row(row):
            continue
        # spreadsheet rows are 1-based and the header occupies the first one
        sheet_row = HEADER_ROW_INDEX + offset + 2
        raw_dimension = row[dimension_col] if dimension_col < len(row) else None
        raw_focus = row[focus_col] if focus_col < len(row) else None
        try:
            dimension = Dimension.parse(raw_dimension)
        except ValueError as exc:
            raise SurveyConfigError(
                f"Row {sheet_row}: {exc}",
                section=SHEET_QUESTION_MAPPING,
                detail={"row": sheet_row},
            ) from exc
        questions.append(QuestionMapping(dimension=dimension, focus=(cell_text(raw_focus) or "").strip()))

    if not questions:
        raise SurveyConfigError("No questions found.", section=SHEET_QUESTION_MAPPING)
    return tuple(questions)


def parse_colors(rows: Optional[Rows]) -> Optional[Dict[Dimension, str]]:
    """Optional colour table; unknown dimensions are ignored."""
    if not rows:
        return None
    colors: Dict[Dimension, str] = {}
    for row in rows[HEADER_ROW_INDEX + 1 :]:
        if len(row) < 2 or is_blank_cell(row[0]) or is_blank_cell(row[1]):
            continue
        try:
            dimension = Dimension.parse(row[0])
        except ValueError:
            continue
        colors[dimension] = cell_text(row[1]).strip()
    return colors or None


@timeit("analysis.load_config")
def load_survey_config(sheets: Mapping[str, Rows]) -> SurveyConfig:
    """Build a validated :class:`SurveyConfig` from parsed workbook sheets.

    Args:
        sheets: Sheet name -> rows of cells, as produced by a spreadsheet
            reader. ``Settings``, ``Likert_Mapping`` and ``Question_Mapping``
            are required; ``Colors`` is optional.

    Raises:
        SurveyConfigError: naming the missing or malformed sheet.
    """
    missing = [name for name in REQUIRED_SHEETS if name not in sheets]
    if missing:
        raise SurveyConfigError(
            f"Configuration is missing sheets: {', '.join(missing)}.",
            detail={"missing_sheets": missing},
        )

    config = SurveyConfig.build(
        start_column=parse_start_column(sheets[SHEET_SETTINGS]),
        likert_map=parse_likert_mapping(sheets[SHEET_LIKERT_MAPPING]),
        questions=parse_questions(sheets[SHEET_QUESTION_MAPPING]),
        colors=parse_colors(sheets.get(SHEET_COLORS)),
    )
    validate_survey_config(config)
    logger.info(
        "config_loaded",
        extra={
            "structured_data": {
                "start_column": config.start_column,
                "likert_entries": len(config.likert_map),
                "questions": len(config.questions),
                "custom_colors": bool(config.colors),
            }
        },
    )
    return config
