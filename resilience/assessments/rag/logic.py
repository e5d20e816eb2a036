"""Survey aggregation for the Resilience Analysis Grid.

The aggregation is a pure reduction over the survey table: each question
column folds into an immutable :class:`QuestionResult` plus the raw answers
it could not map; question results fold into one :class:`DimensionResult`
per potential; dimension areas fold into the overall score.

Inputs are assumed to have passed :mod:`resilience.assessments.validators`.
Short rows are still tolerated (a missing cell counts as no answer).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from resilience.assessments.constants import AVERAGE_DECIMALS, HEADER_ROW_INDEX, LIKERT_MAX_SCORE
from resilience.core.numeric import round_exact, safe_div

from .calculations import cell_text, describe_scores, is_blank_cell, normalize_answer, polygon_area
from .enums import Dimension
from .types import DimensionResult, OverallResult, QuestionMapping, QuestionResult, SurveyConfig

__all__ = [
    "data_rows",
    "is_empty_row",
    "score_question",
    "score_dimension",
    "merge_warnings",
    "aggregate_survey",
]

Row = Sequence[Any]


def is_empty_row(row: Row | None) -> bool:
    """A row is empty when it has no cells or every cell is blank."""
    if not row:
        return True
    return all(is_blank_cell(cell) for cell in row)


def data_rows(rows: Sequence[Row]) -> List[Row]:
    """Respondent rows: everything after the header that is not entirely empty."""
    return [row for row in rows[HEADER_ROW_INDEX + 1 :] if not is_empty_row(row)]


def _cell(row: Row, column: int) -> Any:
    return row[column] if column < len(row) else None


def score_question(
    index: int,
    question: QuestionMapping,
    respondents: Sequence[Row],
    config: SurveyConfig,
) -> Tuple[QuestionResult, Tuple[str, ...]]:
    """Score one question column.

    Returns the question result and the raw answers of that column that had
    no exact match in the Likert mapping (deduplicated, first-seen order).
    """
    column = config.start_column + index
    valid: List[float] = []
    unmapped: Dict[str, None] = {}
    for row in respondents:
        raw = _cell(row, column)
        score = normalize_answer(raw, config.likert_map)
        if score is not None:
            valid.append(score)
        elif not is_blank_cell(raw):
            unmapped.setdefault(cell_text(raw), None)

    average = round_exact(sum(valid) / len(valid), AVERAGE_DECIMALS) if valid else 0.0
    result = QuestionResult(
        id=index + 1,
        dimension=question.dimension,
        focus=question.focus,
        average_score=average,
        stats=describe_scores(valid),
    )
    return result, tuple(unmapped)


def score_dimension(name: Dimension, questions: Sequence[QuestionResult]) -> DimensionResult:
    """Compare the radar polygon of the question averages with the all-maximum polygon.

    Dimensions with fewer than three questions enclose no area on either
    polygon and therefore score 0.
    """
    area = polygon_area([question.average_score for question in questions])
    max_area = polygon_area([LIKERT_MAX_SCORE] * len(questions))
    score = safe_div(area, max_area) * 100.0
    return DimensionResult(
        name=name,
        score=score,
        questions=tuple(questions),
        area=area,
        max_area=max_area,
    )


def merge_warnings(groups: Iterable[Sequence[str]]) -> Tuple[str, ...]:
    merged: Dict[str, None] = {}
    for group in groups:
        for value in group:
            merged.setdefault(value, None)
    return tuple(merged)


def aggregate_survey(rows: Sequence[Row], config: SurveyConfig) -> OverallResult:
    """Turn survey rows and a scoring configuration into the overall result.

    Args:
        rows: Survey table; row 0 is the header and carries no answers.
        config: Validated scoring configuration.

    Returns:
        OverallResult with one DimensionResult per potential (empty ones
        included), the overall score and the unmapped answer warnings.

    Note:
        The overall score is the ratio of summed actual areas to summed
        maximum areas, so dimensions with more questions weigh more.
    """
    respondents = data_rows(rows)
    scored = [
        score_question(index, question, respondents, config)
        for index, question in enumerate(config.questions)
    ]
    question_results = [result for result, _ in scored]

    dimensions = {
        name: score_dimension(name, [q for q in question_results if q.dimension == name])
        for name in Dimension
    }
    total_area = sum(result.area for result in dimensions.values())
    total_max_area = sum(result.max_area for result in dimensions.values())
    overall = safe_div(total_area, total_max_area) * 100.0

    return OverallResult(
        dimensions=MappingProxyType(dimensions),
        overall_resilience=overall,
        total_respondents=len(respondents),
        warnings=merge_warnings(unmapped for _, unmapped in scored),
    )
