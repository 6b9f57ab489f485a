"""OpenTelemetry tracing helpers for admission operations.

Provides a thread-safe cached tracer factory and a span context manager
used by the webhook around each defaulting and validation entry point.

Spans record only metadata (operation, resource identity, error count);
spec contents are never attached.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from opentelemetry.trace import Tracer

TRACER_NAME = "awscluster_admission"

ATTR_CLUSTER_NAME = "admission.cluster_name"
ATTR_NAMESPACE = "admission.namespace"
ATTR_OPERATION = "admission.operation"
ATTR_ERROR_COUNT = "admission.error_count"

_MAX_MESSAGE_LENGTH = 500

logger = structlog.get_logger(__name__)

_tracers: dict[str, Tracer] = {}
_lock = threading.Lock()


def _create_tracer(name: str) -> Tracer:
    try:
        return trace.get_tracer(name)
    except Exception:
        # Tracing failures never fail an admission request.
        logger.warning("tracer_init_failed", tracer=name, exc_info=True)
        return trace.NoOpTracer()


def get_tracer(name: str = TRACER_NAME) -> Tracer:
    """Return the tracer cached under ``name``, creating it on first use.

    Creation failures are cached as a NoOpTracer until ``reset_tracer``
    is called, so a misconfigured provider is reported once per name.

    Args:
        name: Instrumenting module name.

    Returns:
        OpenTelemetry Tracer instance for the given name.
    """
    with _lock:
        tracer = _tracers.get(name)
        if tracer is None:
            tracer = _tracers[name] = _create_tracer(name)
        return tracer


def set_tracer(name: str, tracer: Tracer | None) -> None:
    """Set or clear the cached tracer for a name (for testing).

    Args:
        name: The tracer name to set.
        tracer: The tracer instance to use, or None to clear.
    """
    with _lock:
        if tracer is None:
            _tracers.pop(name, None)
        else:
            _tracers[name] = tracer


def reset_tracer() -> None:
    """Drop every cached or injected tracer."""
    with _lock:
        _tracers.clear()


@contextmanager
def admission_span(
    tracer: Tracer,
    operation: str,
    *,
    cluster_name: str | None = None,
    namespace: str | None = None,
    extra_attributes: dict[str, Any] | None = None,
) -> Iterator[trace.Span]:
    """Context manager for admission operation spans.

    Args:
        tracer: OpenTelemetry tracer instance.
        operation: Operation name (e.g., "validate_update").
        cluster_name: Name of the AWSCluster under admission.
        namespace: Namespace of the AWSCluster.
        extra_attributes: Additional span attributes.

    Yields:
        The active span, so callers can record results such as error counts.
    """
    attributes: dict[str, Any] = {ATTR_OPERATION: operation}

    if cluster_name:
        attributes[ATTR_CLUSTER_NAME] = cluster_name
    if namespace:
        attributes[ATTR_NAMESPACE] = namespace
    if extra_attributes:
        attributes.update(extra_attributes)

    with tracer.start_as_current_span(
        f"admission.{operation}",
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.set_attribute("exception.type", type(e).__name__)
            span.set_attribute("exception.message", str(e)[:_MAX_MESSAGE_LENGTH])
            raise


__all__ = [
    "ATTR_CLUSTER_NAME",
    "ATTR_ERROR_COUNT",
    "ATTR_NAMESPACE",
    "ATTR_OPERATION",
    "TRACER_NAME",
    "admission_span",
    "get_tracer",
    "reset_tracer",
    "set_tracer",
]
