"""
Fixed-window rate limiting keyed by client address.

Each client gets ``max_requests`` requests per window. Counters live in
process memory, so limits are per worker process.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float


class FixedWindowStore:
    """In-memory request counters, one window per key."""

    def __init__(self, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> tuple[int, float]:
        """
        Record a request for ``key``.

        Returns:
            The request count in the current window and the seconds left
            until the window resets.
        """
        now = self._clock()
        window = self._windows.get(key)
        if window is None or window.reset_at <= now:
            self._prune(now)
            window = _Window(count=0, reset_at=now + self.window_seconds)
            self._windows[key] = window
        window.count += 1
        return window.count, window.reset_at - now

    def _prune(self, now: float) -> None:
        expired = [key for key, window in self._windows.items() if window.reset_at <= now]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed ``max_requests`` per ``window_ms``."""

    def __init__(self, app, max_requests: int, window_ms: int, store: FixedWindowStore | None = None):
        super().__init__(app)
        self.max_requests = max_requests
        self.store = store or FixedWindowStore(window_ms / 1000)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_key = request.client.host if request.client else "unknown"
        count, reset_in = self.store.hit(client_key)

        remaining = max(self.max_requests - count, 0)
        reset_seconds = str(math.ceil(reset_in))
        headers = {
            "X-RateLimit-Limit": str(self.max_requests),
            "X-RateLimit-Remaining": str(remaining),
            "X-RateLimit-Reset": reset_seconds,
        }

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for %s on %s", client_key, request.url.path)
            headers["Retry-After"] = reset_seconds
            return JSONResponse(
                status_code=429,
                content={"detail": f"Rate limit exceeded, retry in {reset_seconds} seconds."},
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
