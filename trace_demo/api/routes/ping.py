"""Ping API route for trace-demo services.

GET /api/v1/ping simulates a short processing step and returns the
service name together with the request id and trace/span ids, so callers
can correlate the response with the service's logs and traces.
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Request, status
from pydantic import BaseModel, ConfigDict, Field

from trace_demo.core.constants import NOT_AVAILABLE, STATUS_OK
from trace_demo.core.logging import get_logger, get_request_id
from trace_demo.observability.tracing import get_current_span_id, get_current_trace_id


# =============================================================================
# Response Models
# =============================================================================


class PingResponse(BaseModel):
    """Response model for /api/v1/ping.

    Serialized with camelCase keys: service, status, requestId, traceId, spanId.
    """

    model_config = ConfigDict(populate_by_name=True)

    service: str = Field(description="Service name", examples=["order-service"])
    status: str = Field(default=STATUS_OK, description="Always 'ok'")
    request_id: str | None = Field(
        alias="requestId",
        description="Request id from X-Request-Id or generated",
        examples=["3f2c8a9e-6a0b-4a53-9a8e-1c1e2f0b7d44"],
    )
    trace_id: str = Field(
        alias="traceId",
        description="Current trace id, or N/A",
        examples=["4bf92f3577b34da6a3ce929d0e0e4736"],
    )
    span_id: str = Field(
        alias="spanId",
        description="Current span id, or N/A",
        examples=["00f067aa0ba902b7"],
    )


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["ping"])


async def simulate_processing(delay_seconds: float, business_step: str, logger: Any) -> None:
    """Sleep to simulate work, then log the business step.

    A cancellation during the sleep is logged with its traceback and
    re-raised so the task stays cancelled.

    Args:
        delay_seconds: How long to sleep.
        business_step: Description appended to the completion log line.
        logger: structlog logger.
    """
    try:
        await asyncio.sleep(delay_seconds)
    except asyncio.CancelledError:
        logger.exception("Interrupted during processing")
        raise
    logger.info(f"Business step simulated - {business_step}")


@router.get(
    "/ping",
    response_model=PingResponse,
    status_code=status.HTTP_200_OK,
    summary="Ping",
    description="Simulates processing and returns request/trace correlation ids.",
)
async def ping(request: Request) -> PingResponse:
    """Ping endpoint.

    Args:
        request: FastAPI request to access app state.

    Returns:
        PingResponse with exactly five fields.
    """
    logger = get_logger(__name__)
    app_state = request.app.state
    request_id = get_request_id()

    logger.info("Received ping request")

    await simulate_processing(
        app_state.settings.ping_delay_ms / 1000,
        app_state.profile.business_step,
        logger,
    )

    trace_id = get_current_trace_id() or NOT_AVAILABLE
    span_id = get_current_span_id() or NOT_AVAILABLE

    logger.info("Sending response")

    return PingResponse(
        service=app_state.service_name,
        status=STATUS_OK,
        request_id=request_id,
        trace_id=trace_id,
        span_id=span_id,
    )
