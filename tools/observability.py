"""Timing and structured logs around calls to external collaborators."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, Mapping, ParamSpec, TypeVar

from lookbook_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

MAX_PREVIEW_ARGS = 6


def _argument_preview(kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    names = list(kwargs)
    preview: Dict[str, Any] = {name: kwargs[name] for name in names[:MAX_PREVIEW_ARGS]}
    if len(names) > MAX_PREVIEW_ARGS:
        preview["truncated"] = True
    return preview


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def instrument_call(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion or failure of ``operation`` with its duration.

    Exceptions are re-raised unchanged; keyword arguments are previewed after
    redaction.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                operation=operation,
                correlation_id=correlation_id,
                arguments=_argument_preview(kwargs),
            )
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(started),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(started),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
