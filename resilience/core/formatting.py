"""Formatting helpers for consistent rounding of displayed scores."""

from __future__ import annotations

from typing import Optional

from resilience.core.numeric import clamp, safe_round

__all__ = ["format_decimal", "format_percent"]


def format_decimal(value: Optional[float], *, decimals: int = 2) -> Optional[float]:
    """Safely round a nullable float value using the shared numeric helpers."""

    if value is None:
        return None
    return safe_round(value, decimals=decimals)


def format_percent(value: Optional[float], *, decimals: int = 1) -> float:
    """Round a 0–100 percentage for display, clamping float spill-over."""

    if value is None:
        return 0.0
    return clamp(safe_round(value, decimals=decimals), 0.0, 100.0)
