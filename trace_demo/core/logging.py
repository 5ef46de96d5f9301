"""Structured logging module for trace-demo services.

Provides JSON-formatted structured logging using structlog, plus the
request-scoped logging context (request id, trace id, span id) that tags
every log line emitted while a request or scheduled tick is running.

Patterns applied:
- Singleton _configured flag prevents reconfiguration
- configure_logging() called ONCE at startup
- Underscore-prefix for unused structlog params
- JSON output via JSONRenderer
- Request context via contextvars (isolated per asyncio task and thread)
"""

import contextvars
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

import structlog
from structlog.types import EventDict

from trace_demo.core.constants import REQUEST_ID_KEY, SPAN_ID_KEY, TRACE_ID_KEY


# =============================================================================
# Singleton Configuration State
# =============================================================================
_configured: bool = False
_service_name: str | None = None


# =============================================================================
# Request Context
# =============================================================================
_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    REQUEST_ID_KEY, default=None
)
_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    TRACE_ID_KEY, default=None
)
_span_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    SPAN_ID_KEY, default=None
)


def get_request_id() -> str | None:
    """Get the request ID of the current request or tick, if any."""
    return _request_id_var.get()


def get_trace_id() -> str | None:
    """Get the trace ID bound to the current logging context, if any."""
    return _trace_id_var.get()


def get_span_id() -> str | None:
    """Get the span ID bound to the current logging context, if any."""
    return _span_id_var.get()


@contextmanager
def request_context(
    request_id: str | None = None,
    trace_id: str | None = None,
    span_id: str | None = None,
) -> Iterator[None]:
    """Bind request ID and trace identifiers for the duration of a block.

    Values are restored to what they were before the block on exit,
    including when the block raises.

    Args:
        request_id: Request identifier to tag log lines with.
        trace_id: 32-char hex trace ID, or None to leave unset.
        span_id: 16-char hex span ID, or None to leave unset.

    Example:
        with request_context(request_id="abc", trace_id=tid, span_id=sid):
            logger.info("handled")
    """
    request_token = _request_id_var.set(request_id)
    trace_token = _trace_id_var.set(trace_id)
    span_token = _span_id_var.set(span_id)
    try:
        yield
    finally:
        _span_id_var.reset(span_token)
        _trace_id_var.reset(trace_token)
        _request_id_var.reset(request_token)


# =============================================================================
# Custom Processors
# =============================================================================
def add_request_context(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add requestId, traceId and spanId to the log event when set.

    Args:
        _logger: Logger instance (unused - required by structlog interface).
        _method_name: Method name (unused).
        event_dict: Event dictionary to process.

    Returns:
        Event dictionary with the bound context keys added.
    """
    for key, var in (
        (REQUEST_ID_KEY, _request_id_var),
        (TRACE_ID_KEY, _trace_id_var),
        (SPAN_ID_KEY, _span_id_var),
    ):
        value = var.get()
        if value is not None:
            event_dict.setdefault(key, value)
    return event_dict


def add_service_name(
    _logger: object, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add a stable "service" field for log routing across services."""
    if _service_name is not None:
        event_dict.setdefault("service", _service_name)
    return event_dict


def _level_to_int(level: str) -> int:
    """Convert log level string to integer.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        Integer log level for structlog filtering.
    """
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# =============================================================================
# Singleton Configuration
# =============================================================================
def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
    service_name: str | None = None,
) -> None:
    """Configure structlog ONCE at application startup.

    Subsequent calls are no-ops unless force=True (for testing).

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Output stream. Defaults to sys.stdout.
        force: Force reconfiguration (for testing only).
        service_name: Value of the "service" field on every event.
    """
    global _configured, _service_name

    if service_name is not None:
        _service_name = service_name

    if _configured and not force:
        return

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_service_name,
        add_request_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )

    _configured = True


def reset_logging() -> None:
    """Reset configuration state for test isolation.

    Only use in tests to allow reconfiguration between tests.
    """
    global _configured, _service_name
    _configured = False
    _service_name = None


def get_logger(name: str) -> Any:
    """Get configured logger by name.

    Auto-configures with defaults if not already configured.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Configured structlog BoundLogger instance.
    """
    configure_logging()  # No-op if already configured
    return structlog.get_logger().bind(logger=name)
