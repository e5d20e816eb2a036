"""Classification of analysis results into status bands for the report layer.

Only the classification lives here: which band a score falls in, the overall
level label, and which potentials count as strengths or weaknesses. The
narrative text built from these is the presentation layer's concern.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from resilience.assessments.rag import load_config
from resilience.assessments.rag.enums import Dimension, ScoreStatus
from resilience.assessments.rag.types import OverallResult, RagParameters, StatusBand, SurveyConfig

__all__ = [
    "ResultSummary",
    "status_for",
    "level_for",
    "summarize_result",
    "resolve_colors",
]


@dataclass(frozen=True, slots=True)
class ResultSummary:
    level: str
    overall_status: ScoreStatus
    statuses: Mapping[Dimension, ScoreStatus]
    strengths: Tuple[Dimension, ...]
    weaknesses: Tuple[Dimension, ...]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "overall_status": self.overall_status.value,
            "statuses": {name.value: status.value for name, status in self.statuses.items()},
            "strengths": [name.value for name in self.strengths],
            "weaknesses": [name.value for name in self.weaknesses],
        }


def _band_for(score: float, params: RagParameters) -> StatusBand:
    for band in params.status_bands:
        if score >= band.minimum:
            return band
    return params.status_bands[-1]


def status_for(score: float, params: Optional[RagParameters] = None) -> ScoreStatus:
    """Status band of a 0–100 score (85 / 70 / 50 thresholds by default)."""
    return _band_for(score, params or load_config()).status


def level_for(overall: float, params: Optional[RagParameters] = None) -> str:
    return _band_for(overall, params or load_config()).level


def summarize_result(result: OverallResult, params: Optional[RagParameters] = None) -> ResultSummary:
    params = params or load_config()
    statuses = {name: status_for(result.dimensions[name].score, params) for name in Dimension}
    strengths = tuple(
        name for name in Dimension if result.dimensions[name].score >= params.strength_threshold
    )
    weaknesses = tuple(
        name for name in Dimension if result.dimensions[name].score < params.weakness_threshold
    )
    return ResultSummary(
        level=level_for(result.overall_resilience, params),
        overall_status=status_for(result.overall_resilience, params),
        statuses=statuses,
        strengths=strengths,
        weaknesses=weaknesses,
    )


def resolve_colors(config: SurveyConfig, params: Optional[RagParameters] = None) -> Dict[Dimension, str]:
    """Default chart colours overridden by the ones the configuration supplies."""
    params = params or load_config()
    colors = dict(params.default_colors)
    if config.colors:
        colors.update(config.colors)
    return colors
