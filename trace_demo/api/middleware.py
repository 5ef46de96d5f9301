"""Request-id middleware for trace-demo services.

Propagates or generates a request id per HTTP request and copies it,
together with the current trace/span ids, into the logging context.

Install it INSIDE TracingMiddleware so the server span is already current
when the trace ids are read.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable

from starlette.datastructures import Headers, MutableHeaders

from trace_demo.core.constants import REQUEST_ID_HEADER
from trace_demo.core.logging import request_context
from trace_demo.observability.tracing import (
    get_current_span_id,
    get_current_trace_id,
)


def generate_request_id() -> str:
    """Generate a new random request id (UUID4 string)."""
    return str(uuid.uuid4())


class RequestIdMiddleware:
    """
    ASGI middleware binding a request id into the logging context.

    - Reads X-Request-Id; generates a UUID4 when absent or empty
    - Binds requestId, traceId, spanId for the duration of the request
    - Echoes the request id back in the X-Request-Id response header
    - Stores the request id on request.state.request_id
    """

    def __init__(
        self,
        app: Callable[..., Any],
        header_name: str = REQUEST_ID_HEADER,
    ) -> None:
        self.app = app
        self.header_name = header_name

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Headers.get returns the first occurrence of a repeated header
        request_id = Headers(scope=scope).get(self.header_name) or generate_request_id()
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                response_headers[self.header_name] = request_id
            await send(message)

        with request_context(
            request_id=request_id,
            trace_id=get_current_trace_id(),
            span_id=get_current_span_id(),
        ):
            await self.app(scope, receive, send_wrapper)
