"""
Observability Package - Distributed Tracing

This package provides OpenTelemetry tracing for the trace-demo services.
Spans are exported to the console by default or to an OTLP collector.
"""

from trace_demo.observability.tracing import (
    TracingMiddleware,
    extract_trace_context,
    format_span_id,
    format_trace_id,
    get_current_span_id,
    get_current_trace_id,
    get_tracer,
    inject_trace_context,
    setup_tracing,
)

__all__ = [
    "setup_tracing",
    "TracingMiddleware",
    "get_tracer",
    "get_current_trace_id",
    "get_current_span_id",
    "format_trace_id",
    "format_span_id",
    "inject_trace_context",
    "extract_trace_context",
]
