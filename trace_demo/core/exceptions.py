"""Custom exceptions for trace-demo services.

Exception Hierarchy:
    TraceDemoError (base)
    └── ConfigurationError
        └── UnknownServiceError

All custom exceptions end in "Error".
"""

from __future__ import annotations

from enum import Enum
from typing import Any


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes used in API error responses and logs."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNKNOWN_SERVICE = "UNKNOWN_SERVICE"


# =============================================================================
# Base Exception
# =============================================================================


class TraceDemoError(Exception):
    """Base exception for all trace-demo errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.INTERNAL_ERROR,
        **kwargs: Any,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(TraceDemoError):
    """Invalid or inconsistent service configuration.

    Attributes:
        setting: Name of the offending setting, if known.
    """

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        error_code: str | ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.setting = setting


class UnknownServiceError(ConfigurationError):
    """No service profile exists for the configured service name.

    Attributes:
        service_name: The name that was requested.
        available: Names of the known service profiles.
    """

    def __init__(
        self,
        service_name: str,
        available: list[str] | None = None,
    ) -> None:
        self.service_name = service_name
        self.available = available or []
        super().__init__(
            f"Unknown service '{service_name}'. Available: {self.available}",
            setting="service_name",
            error_code=ErrorCode.UNKNOWN_SERVICE,
        )
