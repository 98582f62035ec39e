"""
Per-client sliding-window rate limiting.

The limiter is an explicit object owned by the FastAPI app (app.state) and
injected into routes through a dependency. It is the only mutable structure
shared between requests, so every access goes through one asyncio.Lock.
"""

import asyncio
import math
import time
from collections import deque
from typing import Callable

import structlog

from choosewise.monitoring.metrics import rate_limited_requests_total

logger = structlog.get_logger(__name__)


class RateLimitExceeded(Exception):
    """
    Raised when a client exceeds its request budget.

    Attributes:
        key: Client key (remote host)
        retry_after: Seconds until the oldest hit leaves the window
    """

    def __init__(self, key: str, retry_after: float):
        self.key = key
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded for {key}, retry after {retry_after:.1f}s")


class SlidingWindowRateLimiter:
    """
    At most `max_requests` hits per key within any `window_seconds` span.

    Idle keys are swept at most once per window so the map does not grow
    with every client ever seen.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()
        self._last_sweep = clock()

    async def acquire(self, key: str) -> None:
        """
        Record a hit for `key`.

        Raises:
            RateLimitExceeded: The key already used its budget in this window
        """
        async with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            hits = self._hits.setdefault(key, deque())
            self._evict(hits, now)

            if len(hits) >= self.max_requests:
                retry_after = max(0.0, hits[0] + self.window_seconds - now)
                rate_limited_requests_total.inc()
                logger.warning(
                    "Rate limit exceeded",
                    client=key,
                    limit=self.max_requests,
                    window_seconds=self.window_seconds,
                    retry_after=math.ceil(retry_after),
                )
                raise RateLimitExceeded(key, retry_after)

            hits.append(now)

    def _evict(self, hits: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        before = len(self._hits)
        for key in list(self._hits):
            hits = self._hits[key]
            self._evict(hits, now)
            if not hits:
                del self._hits[key]
        self._last_sweep = now
        logger.debug("Rate limiter sweep", keys_before=before, keys_after=len(self._hits))

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)
