"""Event catalogs and service profiles for the scheduled log generator.

order-service and payment-service share one codebase; everything that
differs between them lives in a ServiceProfile:

- the event names the generator picks from
- the fabricated entity id format (ORD-1234 / PAY-1234)
- the WARNING / ERROR message suffixes
- the generator interval (3s / 4s)
- the business step logged by the ping endpoint
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Final

from trace_demo.core.constants import ORDER_SERVICE, PAYMENT_SERVICE
from trace_demo.core.exceptions import UnknownServiceError


# =============================================================================
# Severity Pool
# =============================================================================

LEVEL_INFO: Final = "info"
LEVEL_WARNING: Final = "warning"
LEVEL_ERROR: Final = "error"

# Uniform draw: INFO 60%, WARNING 20%, ERROR 20%
LOG_LEVELS: Final[tuple[str, ...]] = (
    LEVEL_INFO,
    LEVEL_INFO,
    LEVEL_INFO,
    LEVEL_WARNING,
    LEVEL_ERROR,
)

MAX_ENTITY_NUMBER: Final = 10000
MIN_AMOUNT: Final = 10.0
AMOUNT_RANGE: Final = 990.0


@dataclass(frozen=True)
class LogEntry:
    """One randomly drawn log line.

    Attributes:
        level: structlog method name (info, warning, error).
        message: Fully formatted message, suffix included.
        event_name: The catalog event that was drawn.
        entity_id: Fabricated order/payment id.
        amount: Payment amount, None for catalogs without amounts.
    """

    level: str
    message: str
    event_name: str
    entity_id: str
    amount: float | None = None


@dataclass(frozen=True)
class EventCatalog:
    """Events and message formatting for one service."""

    events: tuple[str, ...]
    id_prefix: str
    id_label: str
    warning_suffix: str
    error_suffix: str
    include_amount: bool = False

    def draw(self, rng: random.Random) -> LogEntry:
        """Draw a random event, entity id, severity (and amount).

        Args:
            rng: Random source.

        Returns:
            LogEntry ready to be logged at entry.level.
        """
        event_name = rng.choice(self.events)
        entity_id = f"{self.id_prefix}{rng.randrange(MAX_ENTITY_NUMBER)}"
        amount: float | None = None
        if self.include_amount:
            amount = MIN_AMOUNT + rng.random() * AMOUNT_RANGE
        level = rng.choice(LOG_LEVELS)

        message = f"{event_name} for {self.id_label}={entity_id}"
        if amount is not None:
            message = f"{message}, amount={amount:.2f}"

        if level == LEVEL_WARNING:
            message += self.warning_suffix
        elif level == LEVEL_ERROR:
            message += self.error_suffix

        return LogEntry(
            level=level,
            message=message,
            event_name=event_name,
            entity_id=entity_id,
            amount=amount,
        )


@dataclass(frozen=True)
class ServiceProfile:
    """Per-service constants."""

    name: str
    catalog: EventCatalog
    log_interval_seconds: float
    business_step: str


# =============================================================================
# Catalogs
# =============================================================================

ORDER_EVENTS = EventCatalog(
    events=(
        "Order created",
        "Order validated",
        "Inventory check completed",
        "Order confirmed",
        "Order dispatched",
        "Order delivered",
    ),
    id_prefix="ORD-",
    id_label="orderId",
    warning_suffix=" - potential delay detected",
    error_suffix=" - validation failed",
)

PAYMENT_EVENTS = EventCatalog(
    events=(
        "Payment initiated",
        "Payment authorized",
        "Payment captured",
        "Payment settled",
        "Refund processed",
        "Payment failed",
    ),
    id_prefix="PAY-",
    id_label="paymentId",
    warning_suffix=" - fraud check pending",
    error_suffix=" - insufficient funds",
    include_amount=True,
)


# =============================================================================
# Profiles
# =============================================================================

SERVICE_PROFILES: Final[dict[str, ServiceProfile]] = {
    ORDER_SERVICE: ServiceProfile(
        name=ORDER_SERVICE,
        catalog=ORDER_EVENTS,
        log_interval_seconds=3.0,
        business_step="processing order validation",
    ),
    PAYMENT_SERVICE: ServiceProfile(
        name=PAYMENT_SERVICE,
        catalog=PAYMENT_EVENTS,
        log_interval_seconds=4.0,
        business_step="processing payment authorization",
    ),
}


def get_service_profile(service_name: str) -> ServiceProfile:
    """Look up the profile for a service name.

    Raises:
        UnknownServiceError: If no profile exists for service_name.
    """
    try:
        return SERVICE_PROFILES[service_name]
    except KeyError:
        raise UnknownServiceError(service_name, sorted(SERVICE_PROFILES)) from None
