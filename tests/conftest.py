"""pytest configuration and fixtures for trace-demo tests.

This module provides shared fixtures for unit tests: captured JSON logs,
an in-memory span exporter, and a test application with the scheduler
disabled.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator
from io import StringIO
from typing import TYPE_CHECKING, Any

import pytest
from fastapi.testclient import TestClient
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter


if TYPE_CHECKING:
    from fastapi import FastAPI
    from opentelemetry.trace import Tracer

    from trace_demo.core.config import Settings

# Keep the module-level app in trace_demo.main quiet during collection
os.environ.setdefault("TRACE_DEMO_SPAN_EXPORTER", "none")
os.environ.setdefault("TRACE_DEMO_LOG_GENERATOR_ENABLED", "false")


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, no external dependencies)")


# =============================================================================
# Logging Fixtures
# =============================================================================


LogReader = Callable[[], list[dict[str, Any]]]


@pytest.fixture
def log_stream() -> Generator[StringIO, None, None]:
    """Route structlog JSON output to a StringIO for the duration of a test.

    Yields:
        Stream receiving one JSON object per line.
    """
    from trace_demo.core.logging import configure_logging, reset_logging

    reset_logging()
    stream = StringIO()
    configure_logging(level="DEBUG", stream=stream, force=True)
    yield stream
    reset_logging()


@pytest.fixture
def read_logs(log_stream: StringIO) -> LogReader:
    """Return a callable parsing every JSON line written so far."""

    def _read() -> list[dict[str, Any]]:
        return [
            json.loads(line) for line in log_stream.getvalue().splitlines() if line.strip()
        ]

    return _read


# =============================================================================
# Tracing Fixtures
# =============================================================================


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter collecting finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> TracerProvider:
    """Local (non-global) TracerProvider exporting synchronously."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def tracer(tracer_provider: TracerProvider) -> Tracer:
    """Tracer bound to the in-memory provider."""
    return tracer_provider.get_tracer("trace_demo.tests")


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with no span export, no scheduler and no ping delay."""
    from trace_demo.core.config import Settings

    return Settings(
        service_name="order-service",
        span_exporter="none",
        log_generator_enabled=False,
        ping_delay_ms=0,
    )


@pytest.fixture
def app(test_settings: Settings, log_stream: StringIO) -> FastAPI:
    """Create a test application (logs captured by log_stream)."""
    from trace_demo.main import create_app

    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client without lifespan (use `with client:` to run it)."""
    return TestClient(app)
