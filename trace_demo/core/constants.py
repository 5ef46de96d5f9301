"""Shared constants for trace-demo services.

Usage:
    from trace_demo.core.constants import REQUEST_ID_HEADER, NOT_AVAILABLE
"""

# =============================================================================
# HTTP
# =============================================================================

REQUEST_ID_HEADER = "X-Request-Id"
API_PREFIX = "/api/v1"
STATUS_OK = "ok"

# Placeholder returned when no span is current
NOT_AVAILABLE = "N/A"


# =============================================================================
# Logging Context Keys (JSON log field names, same as the ping response)
# =============================================================================

REQUEST_ID_KEY = "requestId"
TRACE_ID_KEY = "traceId"
SPAN_ID_KEY = "spanId"


# =============================================================================
# Tracing
# =============================================================================

SCHEDULED_SPAN_NAME = "scheduled-log-generation"
HTTP_TRACER_NAME = "trace_demo.http"
SCHEDULER_TRACER_NAME = "trace_demo.scheduler"


# =============================================================================
# Service Defaults
# =============================================================================

ORDER_SERVICE = "order-service"
PAYMENT_SERVICE = "payment-service"

DEFAULT_SERVICE_NAME = ORDER_SERVICE
DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_PING_DELAY_MS = 50
DEFAULT_SPAN_EXPORTER = "console"
