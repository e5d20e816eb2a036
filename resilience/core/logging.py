from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping, MutableMapping
from uuid import uuid4


_CORRELATION_ID: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_LEVELS_BY_ENVIRONMENT: Dict[str, int] = {
    "dev": logging.DEBUG,
    "test": logging.DEBUG,
    "staging": logging.INFO,
    "prod": logging.INFO,
}


class JsonFormatter(logging.Formatter):
    """Serialize log records into single-line JSON for structured ingestion."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        correlation_id = _CORRELATION_ID.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        structured = getattr(record, "structured_data", None)
        if isinstance(structured, Mapping):
            for key, value in structured.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredAdapter(logging.LoggerAdapter):
    """Logger adapter that merges default and per-call fields into ``structured_data``."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        fields: Dict[str, Any] = dict(self.extra or {})
        extra = kwargs.get("extra")
        if not isinstance(extra, dict):
            extra = {}
        structured = extra.get("structured_data")
        if isinstance(structured, Mapping):
            fields.update(structured)
        extra["structured_data"] = fields
        kwargs["extra"] = extra
        return msg, kwargs


_STRUCTURED_ATTR = "_resilience_structured"


def configure_logging(*, level: int | None = None, environment: str = "dev") -> None:
    """Install the JSON handler on the root logger once.

    When ``level`` is omitted the level follows ``environment``: DEBUG for
    ``dev``/``test``, INFO otherwise. Repeated calls are no-ops.
    """
    root = logging.getLogger()
    if getattr(root, _STRUCTURED_ATTR, False):
        return

    effective_level = level if level is not None else _LEVELS_BY_ENVIRONMENT.get(environment, logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(effective_level)
    setattr(root, _STRUCTURED_ATTR, True)


def get_logger(name: str, **defaults: Any) -> StructuredAdapter:
    """Return a structured logger adapter injecting default structured fields."""

    return StructuredAdapter(logging.getLogger(name), defaults)


def get_correlation_id() -> str | None:
    return _CORRELATION_ID.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block."""

    cid = correlation_id or str(uuid4())
    token = _CORRELATION_ID.set(cid)
    try:
        yield cid
    finally:
        _CORRELATION_ID.reset(token)


__all__ = [
    "JsonFormatter",
    "StructuredAdapter",
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "correlation_context",
]
