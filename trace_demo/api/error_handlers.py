"""Error handlers for FastAPI exception handling.

Error Response Schema:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable message",
        "service": "order-service",
        "request_id": "..."
    }
}

Unhandled exceptions are caught outside RequestIdMiddleware, so the
request id is read back from request.state and re-attached as a header.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trace_demo.core.constants import REQUEST_ID_HEADER, REQUEST_ID_KEY
from trace_demo.core.exceptions import ErrorCode, TraceDemoError
from trace_demo.core.logging import get_logger


# =============================================================================
# Error Response Models (Pydantic)
# =============================================================================


class ErrorDetail(BaseModel):
    """Error detail schema.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        service: Service that generated the error.
        request_id: Request id of the failed request, if known.
    """

    code: str
    message: str
    service: str | None = None
    request_id: str | None = None


class ErrorResponse(BaseModel):
    """Error response wrapper."""

    error: ErrorDetail


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(request: Request, error: Exception) -> ErrorResponse:
    """Build a standardized error response.

    Args:
        request: The request that failed.
        error: The exception that occurred.

    Returns:
        ErrorResponse with structured error information.
    """
    if isinstance(error, TraceDemoError):
        code = error.error_code
        message = error.message
    else:
        code = ErrorCode.INTERNAL_ERROR.value
        message = "Internal server error"

    return ErrorResponse(
        error=ErrorDetail(
            code=code,
            message=message,
            service=getattr(request.app.state, "service_name", None),
            request_id=getattr(request.state, "request_id", None),
        )
    )


def _json_error(request: Request, error: Exception) -> JSONResponse:
    response = build_error_response(request, error)
    headers = {}
    if response.error.request_id is not None:
        headers[REQUEST_ID_HEADER] = response.error.request_id
    return JSONResponse(
        status_code=500,
        content=response.model_dump(),
        headers=headers,
    )


# =============================================================================
# Exception Handlers
# =============================================================================


async def trace_demo_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle TraceDemoError exceptions raised inside a request."""
    get_logger(__name__).error(
        "Request failed",
        error_code=getattr(exc, "error_code", None),
        error=str(exc),
    )
    return _json_error(request, exc)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic/unexpected exceptions.

    The message is not echoed to the client.
    """
    get_logger(__name__).error(
        "Unhandled exception",
        path=request.url.path,
        exc_info=exc,
        **{REQUEST_ID_KEY: getattr(request.state, "request_id", None)},
    )
    return _json_error(request, exc)


# =============================================================================
# Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.add_exception_handler(TraceDemoError, trace_demo_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
