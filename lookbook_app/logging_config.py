"""Structured JSON logging with per-request correlation ids.

Every record is rendered as a single JSON object. ``log_event`` attaches an
event name plus arbitrary fields; identifiers, contact details and URLs are
scrubbed before they reach a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator, Mapping

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("lookbook_correlation_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}
SENSITIVE_KEYS = frozenset(
    {
        "user_id",
        "email",
        "location",
        "wardrobe_items",
        "image_url",
        "notes",
        "prompt",
    }
)
_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+")
_URL = re.compile(r"^https?://", re.IGNORECASE)
_HANDLER_NAME = "lookbook-json"

_LOGGER = logging.getLogger(__name__)


def _scrub_text(value: str) -> str:
    if _URL.match(value):
        return "[redacted-url]"
    return _EMAIL.sub("[redacted-email]", value)


def redact_for_log(payload: Any) -> Any:
    """Return a JSON-friendly copy of ``payload`` with sensitive values masked."""

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, Mapping):
        return {
            key: "[redacted]" if key in SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


class JsonFormatter(logging.Formatter):
    """Render log records as JSON including event name and correlation id."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
            "event": getattr(record, "event", message),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and key not in payload:
                payload[key] = redact_for_log(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install the JSON handler on the root logger.

    Calling this again replaces the handler it installed earlier and leaves
    handlers owned by other code (test capture, for instance) alone.
    """

    desired = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(desired, str):
        desired = desired.upper()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(desired)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id`` or keep the current one, creating it if unset."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current is None:
        current = uuid.uuid4().hex
        CORRELATION_ID.set(current)
    return current


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block."""

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with structured, redacted fields."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra = redact_for_log(fields)
    # LogRecord refuses extras that shadow its own attributes.
    for key in _RESERVED_ATTRS.intersection(extra):
        extra[f"field_{key}"] = extra.pop(key)
    logger.log(level, event, exc_info=exc_info, extra={"event": event, "correlation_id": correlation_id, **extra})


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id around a named operation and time it at debug level."""

    with correlation_context(attributes.pop("correlation_id", None)) as correlation_id:
        started = time.perf_counter()
        _LOGGER.debug("operation started", extra={"operation": name, **redact_for_log(attributes)})
        try:
            yield correlation_id
        finally:
            _LOGGER.debug(
                "operation finished",
                extra={"operation": name, "duration_ms": round((time.perf_counter() - started) * 1000, 2)},
            )


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "SENSITIVE_KEYS",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
