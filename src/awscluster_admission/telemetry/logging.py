"""Structured logging setup with OpenTelemetry trace correlation.

Logs emitted inside an active span carry its trace_id and span_id so
admission decisions can be joined with the request trace.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID

# Type alias for structlog EventDict
EventDict = MutableMapping[str, Any]


def add_trace_context(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Add trace context to a structlog event dictionary.

    Structlog processor that injects trace_id and span_id from the
    active OpenTelemetry span.

    Args:
        logger: The logger instance (unused, required by structlog processor API).
        method_name: The log method name (e.g., "info", "debug").
        event_dict: The event dictionary to enrich with trace context.

    Returns:
        The event dictionary with trace_id and span_id added if a span is active.
    """
    ctx = trace.get_current_span().get_span_context()

    if ctx.trace_id != INVALID_TRACE_ID and ctx.span_id != INVALID_SPAN_ID:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")

    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Configure structlog with trace context injection.

    Args:
        log_level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: If True, render JSON lines. If False, use console format.

    Raises:
        ValueError: If log_level is not a known level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        msg = f"Unknown log level: {log_level}"
        raise ValueError(msg)

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_trace_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


__all__ = [
    "add_trace_context",
    "configure_logging",
]
