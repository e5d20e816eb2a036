from __future__ import annotations

from enum import StrEnum

__all__ = ["Dimension", "ScoreStatus"]


class Dimension(StrEnum):
    """The four resilience potentials using canonical labels."""

    RESPONSE = "Response"
    MONITOR = "Monitor"
    ANTICIPATE = "Anticipate"
    LEARN = "Learn"

    @classmethod
    def parse(cls, value: object) -> "Dimension":
        """Resolve a free-text tag case-insensitively (``" monitor "`` -> MONITOR)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip() if value is not None else ""
        normalized = text[:1].upper() + text[1:].lower()
        try:
            return cls(normalized)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Invalid dimension '{text}'. Allowed: {allowed}.") from None


class ScoreStatus(StrEnum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    CRITICAL = "Critical"
