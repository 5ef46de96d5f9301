"""OpenTelemetry Tracing Module.

This module provides distributed tracing for the trace-demo services.
Trace context is extracted from incoming W3C `traceparent` headers, a
SERVER span is opened per HTTP request, and trace/span ids of the current
span are exposed as hex strings for log correlation.
"""

from typing import Any, Callable, Literal, Optional

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.propagate import extract, inject
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import SpanKind, Tracer

from trace_demo.core.constants import HTTP_TRACER_NAME
from trace_demo.core.exceptions import ConfigurationError

SpanExporterName = Literal["console", "otlp", "none"]


def setup_tracing(
    service_name: str,
    exporter: SpanExporterName = "console",
    otlp_endpoint: Optional[str] = None,
) -> TracerProvider:
    """
    Configure OpenTelemetry TracerProvider.

    The provider is registered globally only when no provider has been
    registered yet; callers should pass the returned provider explicitly.

    Args:
        service_name: Name of the service for resource identification
        exporter: Span exporter backend ("console", "otlp" or "none")
        otlp_endpoint: OTLP exporter endpoint (e.g., http://localhost:4317)

    Returns:
        Configured TracerProvider

    Raises:
        ConfigurationError: If exporter is "otlp" and no endpoint is given
    """
    resource = Resource.create({SERVICE_NAME: service_name})
    provider = TracerProvider(resource=resource)

    if exporter == "otlp":
        if not otlp_endpoint:
            raise ConfigurationError(
                "span_exporter=otlp requires otlp_endpoint", setting="otlp_endpoint"
            )
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
            OTLPSpanExporter,
        )

        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint))
        )
    elif exporter == "console":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    # Only the first provider in a process becomes the global one
    if isinstance(trace.get_tracer_provider(), trace.ProxyTracerProvider):
        trace.set_tracer_provider(provider)
    return provider


def get_tracer(
    name: str = __name__, provider: Optional[trace.TracerProvider] = None
) -> Tracer:
    """Get a named tracer, from `provider` if given else the global provider."""
    if provider is not None:
        return provider.get_tracer(name)
    return trace.get_tracer(name)


def format_trace_id(trace_id: int) -> str:
    """Format an integer trace ID as 32 lowercase hex chars."""
    return format(trace_id, "032x")


def format_span_id(span_id: int) -> str:
    """Format an integer span ID as 16 lowercase hex chars."""
    return format(span_id, "016x")


def get_current_trace_id() -> Optional[str]:
    """Get the current trace ID as hex string."""
    span_context = trace.get_current_span().get_span_context()

    if not span_context.is_valid:
        return None

    return format_trace_id(span_context.trace_id)


def get_current_span_id() -> Optional[str]:
    """Get the current span ID as hex string."""
    span_context = trace.get_current_span().get_span_context()

    if not span_context.is_valid:
        return None

    return format_span_id(span_context.span_id)


def inject_trace_context(headers: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Inject trace context into headers for outbound requests."""
    carrier = headers if headers is not None else {}
    inject(carrier)
    return carrier


def extract_trace_context(headers: dict[str, Any]) -> Context:
    """Extract trace context from incoming headers."""
    return extract(headers)


def headers_to_dict(headers: list[tuple[bytes, bytes]]) -> dict[str, str]:
    """Convert ASGI headers to a dict with lower-cased names."""
    return {
        key.decode("latin-1").lower(): value.decode("latin-1")
        for key, value in headers
    }


class TracingMiddleware:
    """
    ASGI middleware for OpenTelemetry tracing.

    Creates spans for HTTP requests and propagates trace context.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        exclude_paths: Optional[list[str]] = None,
        tracer: Optional[Tracer] = None,
        tracer_name: str = HTTP_TRACER_NAME,
    ) -> None:
        self.app = app
        self.exclude_paths = exclude_paths or []
        self.tracer = tracer or get_tracer(tracer_name)

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        path = scope.get("path", "/")

        if path in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        headers_dict = headers_to_dict(scope.get("headers", []))
        parent_context = extract_trace_context(headers_dict)

        span_name = f"{method} {path}"
        status_code = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        with self.tracer.start_as_current_span(
            span_name,
            context=parent_context,
            kind=SpanKind.SERVER,
            record_exception=False,
            set_status_on_exception=True,
        ) as span:
            span.set_attribute("http.method", method)
            span.set_attribute("http.route", path)

            try:
                await self.app(scope, receive, send_wrapper)
                span.set_attribute("http.status_code", status_code)
            except Exception as e:
                span.set_attribute("http.status_code", 500)
                span.record_exception(e)
                raise
