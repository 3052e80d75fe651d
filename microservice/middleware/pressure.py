"""
Load shedding under resource pressure.

A ``PressureMonitor`` samples event loop delay and resident memory in a
background task started by the application lifespan. While the latest
sample exceeds a threshold, ``UnderPressureMiddleware`` answers every
request with 503 instead of running the handler.
"""

import asyncio
import logging
from typing import Callable

import psutil
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

MAX_EVENT_LOOP_DELAY_MS = 1000
MAX_RSS_BYTES = 512 * 1024 * 1024
SAMPLE_INTERVAL_SECONDS = 1.0
RETRY_AFTER_SECONDS = 10


class PressureMonitor:
    """Tracks the most recent resource sample against fixed thresholds."""

    def __init__(
        self,
        max_event_loop_delay_ms: float = MAX_EVENT_LOOP_DELAY_MS,
        max_rss_bytes: int = MAX_RSS_BYTES,
        sample_interval: float = SAMPLE_INTERVAL_SECONDS,
    ):
        self.max_event_loop_delay_ms = max_event_loop_delay_ms
        self.max_rss_bytes = max_rss_bytes
        self.sample_interval = sample_interval
        self.event_loop_delay_ms = 0.0
        self.rss_bytes = 0
        self._process = psutil.Process()
        self._task: asyncio.Task | None = None

    def record(self, event_loop_delay_ms: float, rss_bytes: int) -> None:
        """Store a sample and log when it crosses a threshold."""
        was_under_pressure = self.is_under_pressure()
        self.event_loop_delay_ms = event_loop_delay_ms
        self.rss_bytes = rss_bytes

        reason = self.pressure_reason()
        if reason and not was_under_pressure:
            logger.warning("Service under pressure: %s", reason)
        elif reason is None and was_under_pressure:
            logger.info("Service pressure relieved.")

    def pressure_reason(self) -> str | None:
        if self.event_loop_delay_ms > self.max_event_loop_delay_ms:
            return f"event loop delay {self.event_loop_delay_ms:.0f}ms"
        if self.rss_bytes > self.max_rss_bytes:
            return f"resident memory {self.rss_bytes} bytes"
        return None

    def is_under_pressure(self) -> bool:
        return self.pressure_reason() is not None

    async def _sample_forever(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            await asyncio.sleep(self.sample_interval)
            # Anything beyond the requested sleep is time the loop was busy
            delay_ms = max(loop.time() - started - self.sample_interval, 0.0) * 1000
            self.record(delay_ms, self._process.memory_info().rss)

    def start(self) -> None:
        """Start background sampling (called at app startup)."""
        if self._task is None:
            self._task = asyncio.create_task(self._sample_forever())
            logger.info("Pressure monitor started.")

    async def stop(self) -> None:
        """Stop background sampling (called at app shutdown)."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Pressure monitor stopped.")


class UnderPressureMiddleware(BaseHTTPMiddleware):
    """Reject requests with 503 while the monitor reports pressure."""

    def __init__(self, app, monitor: PressureMonitor):
        super().__init__(app)
        self.monitor = monitor

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.monitor.is_under_pressure():
            return JSONResponse(
                status_code=503,
                content={"detail": "Service Unavailable"},
                headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
            )
        return await call_next(request)
