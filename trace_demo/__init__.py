"""trace-demo: order-service and payment-service observability skeletons.

This package provides a ping endpoint, request-id propagation into the
structured logging context, and a scheduled random log generator, all
correlated with OpenTelemetry trace/span ids.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
