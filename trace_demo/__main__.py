"""Run a trace-demo service with `python -m trace_demo`.

The service is chosen with TRACE_DEMO_SERVICE_NAME (order-service or
payment-service).
"""

import uvicorn

from trace_demo.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "trace_demo.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
