"""Pure RAG calculations detached from I/O concerns.

This module contains the three leaf computations of resilience scoring:

- answer normalization (free-text Likert answer -> score)
- descriptive statistics over one question's valid scores
- polygon area of a radar profile (Shoelace formula)

All functions are pure and deterministic. Constants are imported from
``resilience.assessments.constants``.
"""

from __future__ import annotations

from collections import Counter
from math import cos, pi, sin, sqrt
from typing import Any, List, Optional, Sequence

from resilience.assessments.constants import MIN_POLYGON_VERTICES
from resilience.core.numeric import is_integral

from .types import LikertMapping, QuestionStats

__all__ = [
    "cell_text",
    "is_blank_cell",
    "normalize_answer",
    "describe_scores",
    "polygon_area",
]


def cell_text(value: Any) -> Optional[str]:
    """Return the string form of a spreadsheet cell, or ``None`` when absent.

    Integral floats render without a fractional part so a cell holding ``4.0``
    reads as ``"4"``, the way the spreadsheet displays it.
    """
    if value is None:
        return None
    if isinstance(value, float) and is_integral(value):
        return str(int(value))
    return str(value)


def is_blank_cell(value: Any) -> bool:
    text = cell_text(value)
    return text is None or not text.strip()


def normalize_answer(raw: Any, likert_map: LikertMapping) -> Optional[float]:
    """Map one raw answer to its configured score.

    Matching is exact after trimming and lower-casing both the answer and
    each mapping key. Returns ``None`` for blank answers and for answers with
    no exact match; there is no partial or keyword matching.

    Example:
        >>> table = LikertMapping.from_pairs({"Strongly Agree": 5})
        >>> normalize_answer("strongly AGREE ", table)
        5
        >>> normalize_answer("kinda agree", table) is None
        True
    """
    if is_blank_cell(raw):
        return None
    needle = cell_text(raw).strip().lower()
    for key, score in likert_map:
        if key.strip().lower() == needle:
            return score
    return None


def describe_scores(scores: Sequence[float]) -> QuestionStats:
    """Summarize one question's valid scores.

    Args:
        scores: Mapped scores for one question; unmapped answers must already
            be excluded.

    Returns:
        QuestionStats with count, median, mode, sample standard deviation,
        min and max. An empty input yields all zeros. Values are not rounded.

    Note:
        Mode ties resolve to the largest tied value. The standard deviation
        uses the ``n - 1`` denominator and is 0 for fewer than two scores.

    Example:
        >>> stats = describe_scores([1, 2, 2, 3])
        >>> (stats.n, stats.median, stats.mode, stats.min, stats.max)
        (4, 2.0, 2, 1, 3)
        >>> round(stats.std_dev, 2)
        0.82
    """
    n = len(scores)
    if n == 0:
        return QuestionStats.empty()

    ordered: List[float] = sorted(scores)
    mid = n // 2
    if n % 2:
        median = float(ordered[mid])
    else:
        median = (ordered[mid - 1] + ordered[mid]) / 2.0

    counts = Counter(ordered)
    mode, _ = max(counts.items(), key=lambda item: (item[1], item[0]))

    if n < 2:
        std_dev = 0.0
    else:
        mean = sum(ordered) / n
        variance = sum((value - mean) ** 2 for value in ordered) / (n - 1)
        std_dev = sqrt(variance)

    return QuestionStats(
        n=n,
        median=median,
        mode=mode,
        std_dev=std_dev,
        min=ordered[0],
        max=ordered[-1],
    )


def polygon_area(scores: Sequence[float]) -> float:
    """Area of the radar polygon drawn from ``scores``.

    Vertex ``i`` sits at angle ``2*pi*i/N`` with radius ``scores[i]``; the
    enclosed area comes from the Shoelace formula. Rotation of the chart does
    not change the magnitude, so the first vertex is placed at angle 0.

    Fewer than three scores enclose nothing and yield 0, whatever the values.

    Example:
        >>> polygon_area([5, 5])
        0.0
        >>> round(polygon_area([5, 5, 5, 5]), 6)
        50.0
    """
    n = len(scores)
    if n < MIN_POLYGON_VERTICES:
        return 0.0

    points = [
        (radius * cos(2 * pi * i / n), radius * sin(2 * pi * i / n))
        for i, radius in enumerate(scores)
    ]
    twice_area = 0.0
    for i, (x_i, y_i) in enumerate(points):
        x_j, y_j = points[(i + 1) % n]
        twice_area += x_i * y_j - x_j * y_i
    return abs(twice_area) * 0.5
