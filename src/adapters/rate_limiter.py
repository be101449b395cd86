"""Sliding-window request admission for catalog clients.

Each client owns one limiter; nothing is shared between instances, so
no locking is needed under single-threaded asyncio.

Known limitations:
- Waiters are retried FIFO-ish; there is no fairness guarantee.
- A pending wait cannot be cancelled except by cancelling the task.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allow at most `max_requests` admissions per trailing `window_seconds`."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    async def admit(self) -> None:
        """Suspend the caller until a request may proceed, then record it."""

        while True:
            now = self._clock()
            self._prune(now)
            if len(self._timestamps) < self.max_requests:
                self._timestamps.append(now)
                return

            wait = self.window_seconds - (now - self._timestamps[0])
            if wait > 0:
                logger.debug("Rate limit reached (%d/%.0fs), waiting %.2fs", self.max_requests, self.window_seconds, wait)
                await self._sleep(wait)

    def stats(self) -> dict[str, float | int]:
        self._prune(self._clock())
        return {
            "in_window": len(self._timestamps),
            "limit": self.max_requests,
            "window_seconds": self.window_seconds,
        }
