from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, StrictFloat, StrictInt, StrictStr

from resilience.assessments.constants import SHEET_COLORS, SHEET_QUESTION_MAPPING
from resilience.assessments.rag.enums import Dimension
from resilience.assessments.rag.types import QuestionMapping, SurveyConfig
from resilience.core.errors import SurveyConfigError

__all__ = [
    "Cell",
    "TableRows",
    "QuestionWrite",
    "SurveyConfigWrite",
    "AnalysisRequest",
    "WorkbookAnalysisRequest",
    "QuestionStatsRead",
    "QuestionResultRead",
    "DimensionResultRead",
    "SummaryRead",
    "AnalysisResponse",
]

# Spreadsheet cells arrive as text, numbers, or nothing at all.
Cell = Union[StrictInt, StrictFloat, StrictStr, None]
TableRows = List[List[Cell]]


class QuestionWrite(BaseModel):
    dimension: str = Field(validation_alias=AliasChoices("dimension", "potential"))
    focus: str = ""


class SurveyConfigWrite(BaseModel):
    start_column: int
    likert_map: Dict[str, float]
    questions: List[QuestionWrite]
    colors: Optional[Dict[str, str]] = None

    def to_domain(self) -> SurveyConfig:
        """Convert to the engine's immutable config, mapping bad tags to a config error."""
        likert = {text: (int(score) if float(score).is_integer() else score) for text, score in self.likert_map.items()}
        try:
            questions = [
                QuestionMapping(Dimension.parse(question.dimension), question.focus.strip())
                for question in self.questions
            ]
        except ValueError as exc:
            raise SurveyConfigError(str(exc), section=SHEET_QUESTION_MAPPING) from exc
        try:
            colors = {Dimension.parse(key): value for key, value in (self.colors or {}).items()}
        except ValueError as exc:
            raise SurveyConfigError(str(exc), section=SHEET_COLORS) from exc
        return SurveyConfig.build(
            start_column=self.start_column,
            likert_map=likert,
            questions=questions,
            colors=colors or None,
        )


class AnalysisRequest(BaseModel):
    survey_rows: TableRows
    config: SurveyConfigWrite


class WorkbookAnalysisRequest(BaseModel):
    survey_rows: TableRows
    config_sheets: Dict[str, TableRows]


class QuestionStatsRead(BaseModel):
    n: int
    median: float
    mode: float
    std_dev: float
    min: float
    max: float


class QuestionResultRead(BaseModel):
    id: int
    dimension: str
    focus: str
    average_score: float
    stats: QuestionStatsRead


class DimensionResultRead(BaseModel):
    name: str
    score: float
    area: float
    max_area: float
    status: str
    color: str
    questions: List[QuestionResultRead]


class SummaryRead(BaseModel):
    level: str
    overall_status: str
    statuses: Dict[str, str]
    strengths: List[str]
    weaknesses: List[str]


class AnalysisResponse(BaseModel):
    overall_resilience: float
    total_respondents: int
    warnings: List[str]
    dimensions: Dict[str, DimensionResultRead]
    summary: SummaryRead
    correlation_id: Optional[str] = None
