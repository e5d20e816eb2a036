from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from .enums import Dimension, ScoreStatus

__all__ = [
    "LikertMapping",
    "QuestionMapping",
    "SurveyConfig",
    "QuestionStats",
    "QuestionResult",
    "DimensionResult",
    "OverallResult",
    "StatusBand",
    "RagParameters",
]


@dataclass(frozen=True, slots=True)
class LikertMapping:
    """Ordered answer-text to score table supplied by the configuration.

    Keys keep the text as entered (trimmed); lookups lower-case both sides.
    """

    entries: Tuple[Tuple[str, float], ...]

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, float]] | Mapping[str, float]) -> "LikertMapping":
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        # a repeated answer text keeps its first position and its last score
        collapsed: dict[str, float] = {}
        for text, score in items:
            collapsed[str(text).strip()] = score
        return cls(tuple(collapsed.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.entries)

    def as_dict(self) -> dict[str, float]:
        return dict(self.entries)


@dataclass(frozen=True, slots=True)
class QuestionMapping:
    dimension: Dimension
    focus: str

    def as_dict(self) -> dict[str, str]:
        return {"dimension": self.dimension.value, "focus": self.focus}


@dataclass(frozen=True, slots=True)
class SurveyConfig:
    """Immutable scoring configuration for one analysis run.

    ``start_column`` is the 0-based survey column holding question 1; question
    ``i`` (0-based) is read from ``start_column + i``.
    """

    start_column: int
    likert_map: LikertMapping
    questions: Tuple[QuestionMapping, ...]
    colors: Optional[Mapping[Dimension, str]] = None

    @classmethod
    def build(
        cls,
        *,
        start_column: int,
        likert_map: LikertMapping | Mapping[str, float],
        questions: Iterable[QuestionMapping | Tuple[Any, str]],
        colors: Optional[Mapping[Any, str]] = None,
    ) -> "SurveyConfig":
        """Coerce loosely typed inputs (plain dicts, string tags) into a config."""
        mapping = likert_map if isinstance(likert_map, LikertMapping) else LikertMapping.from_pairs(likert_map)
        declared = tuple(
            item if isinstance(item, QuestionMapping) else QuestionMapping(Dimension.parse(item[0]), str(item[1]).strip())
            for item in questions
        )
        frozen_colors = None
        if colors:
            frozen_colors = MappingProxyType({Dimension.parse(key): str(value) for key, value in colors.items()})
        return cls(start_column=start_column, likert_map=mapping, questions=declared, colors=frozen_colors)

    @property
    def end_column(self) -> int:
        """Exclusive upper bound of the question columns."""
        return self.start_column + len(self.questions)


@dataclass(frozen=True, slots=True)
class QuestionStats:
    n: int
    median: float
    mode: float
    std_dev: float
    min: float
    max: float

    @classmethod
    def empty(cls) -> "QuestionStats":
        return cls(n=0, median=0.0, mode=0.0, std_dev=0.0, min=0.0, max=0.0)

    def as_dict(self) -> dict[str, float]:
        return {
            "n": self.n,
            "median": self.median,
            "mode": self.mode,
            "std_dev": self.std_dev,
            "min": self.min,
            "max": self.max,
        }


@dataclass(frozen=True, slots=True)
class QuestionResult:
    id: int
    dimension: Dimension
    focus: str
    average_score: float
    stats: QuestionStats

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "dimension": self.dimension.value,
            "focus": self.focus,
            "average_score": self.average_score,
            "stats": self.stats.as_dict(),
        }


@dataclass(frozen=True, slots=True)
class DimensionResult:
    name: Dimension
    score: float
    questions: Tuple[QuestionResult, ...]
    area: float
    max_area: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name.value,
            "score": self.score,
            "questions": [question.as_dict() for question in self.questions],
            "area": self.area,
            "max_area": self.max_area,
        }


@dataclass(frozen=True, slots=True)
class OverallResult:
    dimensions: Mapping[Dimension, DimensionResult]
    overall_resilience: float
    total_respondents: int
    warnings: Tuple[str, ...]

    def dimension(self, name: Dimension | str) -> DimensionResult:
        return self.dimensions[Dimension.parse(name)]

    @property
    def questions(self) -> Tuple[QuestionResult, ...]:
        """All question results in declaration (id) order."""
        collected = [q for result in self.dimensions.values() for q in result.questions]
        return tuple(sorted(collected, key=lambda q: q.id))

    def as_dict(self) -> dict[str, Any]:
        return {
            "dimensions": {name.value: result.as_dict() for name, result in self.dimensions.items()},
            "overall_resilience": self.overall_resilience,
            "total_respondents": self.total_respondents,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True, slots=True)
class StatusBand:
    """Lower bound (inclusive) of a status band and its overall level label."""

    status: ScoreStatus
    minimum: float
    level: str


@dataclass(frozen=True, slots=True)
class RagParameters:
    """Immutable container for the RAG instrument presentation parameters."""

    instrument_id: str
    version: str
    status_bands: Tuple[StatusBand, ...]
    strength_threshold: float
    weakness_threshold: float
    default_colors: Mapping[Dimension, str]

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "RagParameters":
        bands = tuple(
            StatusBand(
                status=ScoreStatus(str(entry["status"])),
                minimum=float(entry["min"]),
                level=str(entry["level"]),
            )
            for entry in payload["status_bands"]
        )
        # evaluated top-down, highest threshold first
        ordered = tuple(sorted(bands, key=lambda band: band.minimum, reverse=True))
        summary = payload.get("summary", {})
        colors = {Dimension.parse(key): str(value) for key, value in payload["default_colors"].items()}
        return cls(
            instrument_id=str(payload["id"]),
            version=str(payload["version"]),
            status_bands=ordered,
            strength_threshold=float(summary.get("strength_min", 80.0)),
            weakness_threshold=float(summary.get("weakness_below", 60.0)),
            default_colors=MappingProxyType(colors),
        )
