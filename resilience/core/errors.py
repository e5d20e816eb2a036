from __future__ import annotations

"""Domain-specific exception hierarchy for the resilience analyzer."""

from typing import Any

__all__ = [
    "DomainError",
    "ValidationError",
    "SurveyConfigError",
    "SurveyShapeError",
    "PayloadTooLargeError",
]


class DomainError(Exception):
    """Base class for recoverable domain-level errors."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = "Domain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DomainError, ValueError):
    """Raised when user-provided survey data fails validation."""

    error_code = "validation_error"
    default_message = "Invalid data"
    status_code = 400


class SurveyConfigError(ValidationError):
    """Raised when the scoring configuration is structurally invalid.

    ``section`` names the configuration part at fault (``Settings``,
    ``Likert_Mapping``, ``Question_Mapping``, ``Colors``) so the caller can
    point the user at the sheet to fix.
    """

    error_code = "survey_config_invalid"
    default_message = "Survey configuration is invalid"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        *,
        section: str | None = None,
        detail: Any | None = None,
    ) -> None:
        payload: dict[str, Any] = {}
        if isinstance(detail, dict):
            payload.update(detail)
        elif detail is not None:
            payload["extra"] = detail
        if section is not None:
            payload.setdefault("section", section)
        super().__init__(message, detail=payload or None)
        self.section = section


class SurveyShapeError(ValidationError):
    """Raised when survey rows cannot satisfy the declared configuration."""

    error_code = "survey_shape_mismatch"
    default_message = "Survey data does not match the configuration"
    status_code = 422


class PayloadTooLargeError(DomainError):
    """Raised when a request carries more survey rows than allowed."""

    error_code = "payload_too_large"
    status_code = 413
    default_message = "Survey payload too large"
