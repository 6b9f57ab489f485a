"""Logging and tracing for the admission engine."""

from __future__ import annotations

from awscluster_admission.telemetry.logging import add_trace_context, configure_logging
from awscluster_admission.telemetry.tracing import (
    admission_span,
    get_tracer,
    reset_tracer,
    set_tracer,
)

__all__ = [
    "add_trace_context",
    "admission_span",
    "configure_logging",
    "get_tracer",
    "reset_tracer",
    "set_tracer",
]
