"""Unit tests for API error handlers.

Tests cover:
- TraceDemoError responses carry the error code and request id
- unexpected exceptions become INTERNAL_ERROR without leaking the message
- X-Request-Id is present on error responses
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trace_demo.api.error_handlers import (
    ErrorDetail,
    ErrorResponse,
    register_exception_handlers,
)
from trace_demo.api.middleware import RequestIdMiddleware
from trace_demo.core.exceptions import ConfigurationError


LogReader = Callable[[], list[dict[str, Any]]]

REQUEST_ID_HEADER = "X-Request-Id"
SUPPLIED_REQUEST_ID = "req-err-001"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def error_client(read_logs: LogReader) -> TestClient:
    """App with routes that raise, request-id middleware and handlers."""
    app = FastAPI()
    app.state.service_name = "order-service"
    register_exception_handlers(app)
    app.add_middleware(RequestIdMiddleware)

    @app.get("/test/configuration")
    async def configuration_error() -> None:
        raise ConfigurationError("bad setting", setting="ping_delay_ms")

    @app.get("/test/unexpected")
    async def unexpected_error() -> None:
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Response Models
# =============================================================================


class TestErrorResponseModel:
    """Test the error response schema."""

    def test_error_response_shape(self) -> None:
        """ErrorResponse wraps an ErrorDetail under "error"."""
        response = ErrorResponse(
            error=ErrorDetail(code="INTERNAL_ERROR", message="oops", request_id="r")
        )

        assert response.model_dump() == {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "oops",
                "service": None,
                "request_id": "r",
            }
        }


# =============================================================================
# Handlers
# =============================================================================


class TestTraceDemoErrorHandler:
    """Test handling of TraceDemoError subclasses."""

    def test_returns_500_with_error_code(self, error_client: TestClient) -> None:
        """The error code and message of the exception are returned."""
        response = error_client.get(
            "/test/configuration", headers={REQUEST_ID_HEADER: SUPPLIED_REQUEST_ID}
        )

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "CONFIGURATION_ERROR"
        assert error["message"] == "bad setting"
        assert error["service"] == "order-service"
        assert error["request_id"] == SUPPLIED_REQUEST_ID
        assert response.headers[REQUEST_ID_HEADER] == SUPPLIED_REQUEST_ID

    def test_failure_logged_with_request_id(
        self, error_client: TestClient, read_logs: LogReader
    ) -> None:
        """The failure is logged inside the request context."""
        error_client.get("/test/configuration", headers={REQUEST_ID_HEADER: SUPPLIED_REQUEST_ID})

        record = read_logs()[-1]
        assert record["event"] == "Request failed"
        assert record["error_code"] == "CONFIGURATION_ERROR"
        assert record["requestId"] == SUPPLIED_REQUEST_ID


class TestGenericErrorHandler:
    """Test handling of unexpected exceptions."""

    def test_returns_internal_error(self, error_client: TestClient) -> None:
        """Unexpected exceptions become INTERNAL_ERROR without the message."""
        response = error_client.get(
            "/test/unexpected", headers={REQUEST_ID_HEADER: SUPPLIED_REQUEST_ID}
        )

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert "secret internals" not in error["message"]
        assert error["request_id"] == SUPPLIED_REQUEST_ID

    def test_request_id_header_on_unhandled_error(self, error_client: TestClient) -> None:
        """X-Request-Id is re-attached even though the middleware was bypassed."""
        response = error_client.get(
            "/test/unexpected", headers={REQUEST_ID_HEADER: SUPPLIED_REQUEST_ID}
        )

        assert response.headers[REQUEST_ID_HEADER] == SUPPLIED_REQUEST_ID

    def test_unhandled_error_logged_with_traceback(
        self, error_client: TestClient, read_logs: LogReader
    ) -> None:
        """The exception and its traceback are logged."""
        error_client.get("/test/unexpected", headers={REQUEST_ID_HEADER: SUPPLIED_REQUEST_ID})

        record = next(r for r in read_logs() if r["event"] == "Unhandled exception")
        assert record["requestId"] == SUPPLIED_REQUEST_ID
        assert record["path"] == "/test/unexpected"
        assert "RuntimeError: secret internals" in record["exception"]
