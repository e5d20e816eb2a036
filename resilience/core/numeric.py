"""Numeric helpers shared by the scoring engine and the reporting layer.

Rounding goes through :class:`decimal.Decimal` so that display values such as
``2.675`` round half-up the way a spreadsheet user expects instead of
inheriting binary floating point artefacts.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, ROUND_HALF_EVEN
from typing import TypeVar

__all__ = [
    "clamp",
    "safe_round",
    "round_exact",
    "safe_div",
    "is_integral",
]


NumericT = TypeVar("NumericT", int, float, Decimal)

_ROUNDING = {
    "half_up": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}


def clamp(value: NumericT, min_value: NumericT, max_value: NumericT) -> NumericT:
    """Clamp ``value`` into ``[min_value, max_value]``.

    Example:
        >>> clamp(100.00000000000003, 0.0, 100.0)
        100.0
    """
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must be <= max_value ({max_value})")
    return max(min_value, min(value, max_value))


def safe_round(value: float, decimals: int = 2, method: str = "half_up") -> float:
    """Round with a fixed decimal precision.

    Example:
        >>> safe_round(2.675)
        2.68
        >>> safe_round(0.8164965809, 2)
        0.82
    """
    if method not in _ROUNDING:
        raise ValueError(f"Invalid rounding method: {method}. Use 'half_up' or 'half_even'.")
    quantizer = Decimal(10) ** -decimals
    rounded = Decimal(str(value)).quantize(quantizer, rounding=_ROUNDING[method])
    return float(rounded)


def round_exact(value: float, decimals: int = 2) -> float:
    """Round the exact binary value of a float half-up.

    Unlike :func:`safe_round`, no decimal string is taken first, so a mean
    stored as ``2.67499999...`` stays below the midpoint.

    Example:
        >>> round_exact(107 / 40)
        2.67
        >>> round_exact(2.125)
        2.13
    """
    quantizer = Decimal(10) ** -decimals
    return float(Decimal(value).quantize(quantizer, rounding=ROUND_HALF_UP))


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def is_integral(value: float) -> bool:
    """True when a float carries no fractional part (``4.0`` but not ``4.5``)."""
    return float(value).is_integer()
