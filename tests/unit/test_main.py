"""Tests for the FastAPI application factory and lifespan.

Tests verify:
- create_app builds an app for each service profile
- unknown service names fail fast
- lifespan starts and stops the random log generator
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trace_demo.core.config import Settings
from trace_demo.core.exceptions import UnknownServiceError


LogReader = Callable[[], list[dict[str, Any]]]


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "span_exporter": "none",
        "log_generator_enabled": False,
        "ping_delay_ms": 0,
    }
    values.update(overrides)
    return Settings(**values)


class TestAppInstance:
    """Test module-level app and create_app()."""

    def test_module_app_is_fastapi_instance(self) -> None:
        """trace_demo.main exposes a FastAPI app."""
        from trace_demo.main import app

        assert isinstance(app, FastAPI)

    def test_title_is_service_name(self, read_logs: LogReader) -> None:
        """The app title is the service name."""
        from trace_demo.main import create_app

        app = create_app(_settings(service_name="payment-service"))

        assert app.title == "payment-service"
        assert app.state.service_name == "payment-service"
        assert app.state.profile.log_interval_seconds == 4.0

    def test_unknown_service_fails_fast(self, read_logs: LogReader) -> None:
        """An unknown service name raises before the app is built."""
        from trace_demo.main import create_app

        with pytest.raises(UnknownServiceError):
            create_app(_settings(service_name="inventory-service"))

    def test_ping_route_registered(self, app: FastAPI) -> None:
        """The ping route lives under /api/v1."""
        paths = {getattr(route, "path", None) for route in app.routes}

        assert "/api/v1/ping" in paths
        assert "/health" in paths


class TestDocumentation:
    """Test OpenAPI documentation endpoints."""

    def test_docs_available_in_development(self, client: TestClient) -> None:
        """Swagger docs are served outside production."""
        response = client.get("/docs")

        assert response.status_code == 200

    def test_docs_disabled_in_production(self, read_logs: LogReader) -> None:
        """Swagger docs are not served in production."""
        from trace_demo.main import create_app

        app = create_app(_settings(environment="production"))

        assert TestClient(app).get("/docs").status_code == 404

    def test_openapi_uses_camel_case_ping_keys(self, client: TestClient) -> None:
        """The ping schema documents the camelCase keys."""
        schema = client.get("/openapi.json").json()

        properties = schema["components"]["schemas"]["PingResponse"]["properties"]
        assert set(properties) == {"service", "status", "requestId", "traceId", "spanId"}


class TestAppLifespan:
    """Test FastAPI lifespan context manager."""

    def test_state_initialized_on_startup(self, app: FastAPI) -> None:
        """initialized flips to True during startup and back on shutdown."""
        with TestClient(app):
            assert app.state.initialized is True
            assert app.state.log_generator is None

        assert app.state.initialized is False

    def test_generator_started_and_stopped(self, read_logs: LogReader) -> None:
        """With the generator enabled it runs during the app's lifetime."""
        from trace_demo.main import create_app

        app = create_app(
            _settings(log_generator_enabled=True, log_generator_interval_seconds=60)
        )

        with TestClient(app) as client:
            generator = app.state.log_generator
            assert generator is not None
            assert generator.is_running
            assert generator.interval == 60
            client.get("/health")

        assert not generator.is_running
        assert app.state.log_generator is None

        events = [record["event"] for record in read_logs()]
        assert "Application starting" in events
        assert "Random log generator started" in events
        assert "Random log generator stopped" in events
        assert "Application shutting down" in events

    def test_generated_lines_tagged_with_service(self, read_logs: LogReader) -> None:
        """Scheduled lines carry the service name and a request id."""
        from trace_demo.main import create_app

        app = create_app(
            _settings(
                service_name="payment-service",
                log_generator_enabled=True,
                log_generator_interval_seconds=60,
            )
        )

        with TestClient(app) as client:
            client.get("/health")
            generator = app.state.log_generator
            deadline = time.monotonic() + 2.0
            while generator.tick_count == 0 and time.monotonic() < deadline:
                time.sleep(0.01)

        generated = [r for r in read_logs() if "paymentId=" in r["event"]]
        assert generated
        assert generated[0]["service"] == "payment-service"
        assert "requestId" in generated[0]
        assert "traceId" in generated[0]
