"""Scheduled random log generator.

Every tick opens a new `scheduled-log-generation` span, binds a fresh
request id plus the span's trace/span ids into the logging context, and
emits one randomly drawn event from the service's catalog.

Ticks run as a single asyncio task with a fixed delay: the next tick
starts `interval` seconds after the previous one finished. The first
tick runs immediately on start().
"""

from __future__ import annotations

import asyncio
import contextlib
import random
import uuid
from typing import Any

from opentelemetry.trace import Tracer

from trace_demo.core.constants import SCHEDULED_SPAN_NAME
from trace_demo.core.logging import get_logger, request_context
from trace_demo.observability.tracing import format_span_id, format_trace_id
from trace_demo.services.events import LogEntry, ServiceProfile


class RandomLogGenerator:
    """Emits a random, trace-correlated log line on a fixed delay.

    Example:
        generator = RandomLogGenerator(tracer, get_service_profile("order-service"))
        generator.start()
        ...
        await generator.stop()
    """

    def __init__(
        self,
        tracer: Tracer,
        profile: ServiceProfile,
        interval: float | None = None,
        rng: random.Random | None = None,
        logger: Any = None,
    ) -> None:
        """Initialize the generator.

        Args:
            tracer: Tracer used to open one span per tick.
            profile: Service profile providing the event catalog.
            interval: Seconds between ticks. Defaults to the profile's interval.
            rng: Random source (seedable for tests).
            logger: structlog logger. Defaults to get_logger(__name__).
        """
        if interval is not None and interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self._tracer = tracer
        self._profile = profile
        self._interval = interval if interval is not None else profile.log_interval_seconds
        self._rng = rng or random.Random()
        self._logger = logger or get_logger(__name__)
        self._task: asyncio.Task[None] | None = None
        self._ticks = 0

    @property
    def interval(self) -> float:
        """Fixed delay between ticks, in seconds."""
        return self._interval

    @property
    def tick_count(self) -> int:
        """Number of completed ticks."""
        return self._ticks

    @property
    def is_running(self) -> bool:
        """True while the background task is alive."""
        return self._task is not None and not self._task.done()

    def generate_random_log(self) -> LogEntry:
        """Run one tick: new span, new request id, one random log line.

        Returns:
            The entry that was logged.
        """
        with self._tracer.start_as_current_span(SCHEDULED_SPAN_NAME) as span:
            span_context = span.get_span_context()
            with request_context(
                request_id=str(uuid.uuid4()),
                trace_id=format_trace_id(span_context.trace_id),
                span_id=format_span_id(span_context.span_id),
            ):
                entry = self._profile.catalog.draw(self._rng)
                span.set_attribute("log.event", entry.event_name)
                span.set_attribute("log.entity_id", entry.entity_id)

                log_method = getattr(self._logger, entry.level)
                log_method(entry.message)

        self._ticks += 1
        return entry

    def start(self) -> None:
        """Start the background task. No-op if already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"{self._profile.name}-log-generator"
        )
        self._logger.info(
            "Random log generator started",
            interval_seconds=self._interval,
        )

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.info("Random log generator stopped", ticks=self._ticks)

    async def _run(self) -> None:
        while True:
            try:
                self.generate_random_log()
            except Exception:
                # Keep the schedule alive; a failed tick is only logged
                self._logger.exception("Scheduled log generation failed")
            await asyncio.sleep(self._interval)
