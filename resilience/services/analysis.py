from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Sequence

from resilience.assessments.rag.enums import Dimension
from resilience.assessments.rag.logic import aggregate_survey
from resilience.assessments.rag.types import OverallResult, QuestionResult, SurveyConfig
from resilience.assessments.validators import validate_survey_config, validate_survey_shape
from resilience.core.config import settings
from resilience.core.formatting import format_decimal, format_percent
from resilience.core.logging import get_correlation_id, get_logger
from resilience.core.metrics import inc_counter, timer
from resilience.schemas.analysis import (
    AnalysisResponse,
    DimensionResultRead,
    QuestionResultRead,
    QuestionStatsRead,
    SummaryRead,
)
from resilience.services.config_loader import load_survey_config
from resilience.services.report import ResultSummary, resolve_colors, summarize_result

logger = get_logger("resilience.services.analysis", component="services")

__all__ = ["AnalysisOutcome", "run_analysis", "analyze_workbook", "build_analysis_response"]


@dataclass(frozen=True, slots=True)
class AnalysisOutcome:
    """Everything the presentation layer needs from one analysis run."""

    config: SurveyConfig
    result: OverallResult
    summary: ResultSummary
    colors: Mapping[Dimension, str]


def run_analysis(rows: Sequence[Sequence[Any]], config: SurveyConfig) -> AnalysisOutcome:
    """Validate inputs, aggregate the survey and classify the result.

    Configuration and shape errors propagate as ``DomainError`` subclasses
    before any scoring happens.
    """
    validate_survey_config(config)
    validate_survey_shape(rows, config)

    with timer("analysis.aggregate", metadata={"questions": len(config.questions), "rows": len(rows)}):
        result = aggregate_survey(rows, config)

    inc_counter("analysis.runs")
    if result.warnings:
        inc_counter("analysis.warnings", len(result.warnings))
        logger.warning(
            "unmapped_answers",
            extra={"structured_data": {"count": len(result.warnings), "values": list(result.warnings)}},
        )

    dimension_scores: Dict[str, float] = {
        name.value: format_percent(result.dimensions[name].score) for name in Dimension
    }
    logger.info(
        "analysis_completed",
        extra={
            "structured_data": {
                "respondents": result.total_respondents,
                "questions": len(config.questions),
                "overall_resilience": format_percent(result.overall_resilience),
                "dimension_scores": dimension_scores,
            }
        },
    )
    return AnalysisOutcome(
        config=config,
        result=result,
        summary=summarize_result(result),
        colors=resolve_colors(config),
    )


def analyze_workbook(
    survey_rows: Sequence[Sequence[Any]],
    config_sheets: Mapping[str, Sequence[Sequence[Any]]],
) -> AnalysisOutcome:
    """Load the configuration workbook sheets, then run the analysis."""
    config = load_survey_config(config_sheets)
    return run_analysis(survey_rows, config)


def build_analysis_response(outcome: AnalysisOutcome, *, decimals: int | None = None) -> AnalysisResponse:
    """Round the outcome for display and shape it into the HTTP response model."""
    places = settings.display_decimals if decimals is None else decimals
    result = outcome.result
    dimensions = {
        name.value: DimensionResultRead(
            name=name.value,
            score=format_percent(result.dimensions[name].score, decimals=places),
            area=format_decimal(result.dimensions[name].area, decimals=places),
            max_area=format_decimal(result.dimensions[name].max_area, decimals=places),
            status=outcome.summary.statuses[name].value,
            color=outcome.colors[name],
            questions=[_question_read(question, places) for question in result.dimensions[name].questions],
        )
        for name in Dimension
    }
    return AnalysisResponse(
        overall_resilience=format_percent(result.overall_resilience, decimals=places),
        total_respondents=result.total_respondents,
        warnings=list(result.warnings),
        dimensions=dimensions,
        summary=SummaryRead(**outcome.summary.as_dict()),
        correlation_id=get_correlation_id(),
    )


def _question_read(question: QuestionResult, places: int) -> QuestionResultRead:
    stats = question.stats
    return QuestionResultRead(
        id=question.id,
        dimension=question.dimension.value,
        focus=question.focus,
        average_score=format_decimal(question.average_score, decimals=places),
        stats=QuestionStatsRead(
            n=stats.n,
            median=format_decimal(stats.median, decimals=places),
            mode=format_decimal(stats.mode, decimals=places),
            std_dev=format_decimal(stats.std_dev, decimals=places),
            min=format_decimal(stats.min, decimals=places),
            max=format_decimal(stats.max, decimals=places),
        ),
    )
