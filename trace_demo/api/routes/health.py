"""Health check API routes for trace-demo services.

Provides liveness (/health) and readiness (/health/ready) endpoints
for Kubernetes probes and service monitoring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from trace_demo import __version__
from trace_demo.core.constants import STATUS_OK


if TYPE_CHECKING:
    from trace_demo.services.log_generator import RandomLogGenerator


# =============================================================================
# Constants
# =============================================================================

STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
GENERATOR_RUNNING = "running"
GENERATOR_STOPPED = "stopped"
GENERATOR_DISABLED = "disabled"
REASON_NOT_STARTED = "Application startup not complete"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(default=STATUS_OK, examples=["ok"])
    service: str = Field(description="Service name", examples=["order-service"])
    version: str = Field(default=__version__, examples=["0.1.0"])


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint."""

    status: str = Field(examples=["ready", "not_ready"])
    service: str = Field(examples=["payment-service"])
    log_generator: str | None = Field(
        default=None,
        description="State of the scheduled log generator",
        examples=["running", "disabled"],
    )
    reason: str | None = Field(default=None, examples=[REASON_NOT_STARTED])


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe endpoint. Returns 200 while the process serves HTTP."""
    return HealthResponse(
        status=STATUS_OK,
        service=request.app.state.service_name,
        version=__version__,
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready", "model": ReadinessResponse},
        503: {"description": "Service is not ready", "model": ReadinessResponse},
    },
    summary="Readiness check",
)
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Returns 503 until lifespan startup has completed.
    """
    state = request.app.state
    service_name: str = state.service_name

    if not getattr(state, "initialized", False):
        response = ReadinessResponse(
            status=STATUS_NOT_READY,
            service=service_name,
            reason=REASON_NOT_STARTED,
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    generator: RandomLogGenerator | None = getattr(state, "log_generator", None)
    if generator is None:
        generator_state = GENERATOR_DISABLED
    elif generator.is_running:
        generator_state = GENERATOR_RUNNING
    else:
        generator_state = GENERATOR_STOPPED

    response = ReadinessResponse(
        status=STATUS_READY,
        service=service_name,
        log_generator=generator_state,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(exclude_none=True),
    )
