"""Core configuration module for trace-demo services.

Loads settings from TRACE_DEMO_* prefixed environment variables using Pydantic Settings.
The same codebase serves order-service and payment-service; TRACE_DEMO_SERVICE_NAME
selects which service profile is active.

Patterns applied:
- pydantic-settings BaseSettings (Pydantic v2 split)
- env_prefix = "TRACE_DEMO_" for namespace isolation
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from trace_demo.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PING_DELAY_MS,
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SPAN_EXPORTER,
)


class Settings(BaseSettings):
    """Application settings loaded from TRACE_DEMO_* environment variables.

    Example: TRACE_DEMO_SERVICE_NAME=payment-service, TRACE_DEMO_PORT=8082

    Attributes:
        service_name: Which service profile to run (order-service, payment-service).
        port: HTTP port (1-65535). Default: 8080.
        host: Bind address. Default: 0.0.0.0.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        ping_delay_ms: Simulated processing delay of the ping endpoint.
        log_generator_enabled: Run the scheduled random log generator.
        log_generator_interval_seconds: Fixed delay between generator ticks.
            None uses the service profile default.
        span_exporter: Where finished spans go (console, otlp, none).
        otlp_endpoint: OTLP gRPC endpoint, used when span_exporter=otlp.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default=DEFAULT_SERVICE_NAME,
        description="Service name, selects the service profile",
    )
    port: int = Field(
        default=DEFAULT_PORT,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default=DEFAULT_ENVIRONMENT,
        description="Deployment environment",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # Behaviour
    # =========================================================================
    ping_delay_ms: int = Field(
        default=DEFAULT_PING_DELAY_MS,
        ge=0,
        description="Simulated processing delay for /api/v1/ping",
    )
    log_generator_enabled: bool = Field(
        default=True,
        description="Run the scheduled random log generator",
    )
    log_generator_interval_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Delay between generator ticks (None = profile default)",
    )

    # =========================================================================
    # Tracing
    # =========================================================================
    span_exporter: Literal["console", "otlp", "none"] = Field(
        default=DEFAULT_SPAN_EXPORTER,
        description="Span exporter backend",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC endpoint (e.g. http://localhost:4317)",
    )

    model_config = {
        "env_prefix": "TRACE_DEMO_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("service_name")
    @classmethod
    def normalize_service_name(cls, v: str) -> str:
        """Strip and lower-case the service name."""
        return v.strip().lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Args:
            v: Input log level string.

        Returns:
            Normalized uppercase log level.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Returns:
        Cached Settings instance.
    """
    return Settings()
