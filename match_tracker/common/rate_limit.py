"""Politeness pacing for outbound requests.

The crawl talks to a single third-party site one request at a time. Instead of
sprinkling fixed sleeps through the extraction code, every stage asks the shared
limiter for a minimum gap since the *last completed request* before it issues
its next one. Stages use different gaps (new team > new competition > next page).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class MinIntervalRateLimiter:
    """Minimum-interval limiter measured from the last recorded request."""

    def __init__(self, *, clock: Clock = time.monotonic, sleep: Sleeper = asyncio.sleep):
        self._clock = clock
        self._sleep = sleep
        self._last_request: Optional[float] = None
        self.logger = logging.getLogger("rate_limiter")

    @property
    def last_request(self) -> Optional[float]:
        return self._last_request

    def mark(self) -> None:
        """Record that a request just completed."""
        self._last_request = self._clock()

    def remaining(self, min_interval: float) -> float:
        if self._last_request is None or min_interval <= 0:
            return 0.0
        return max(0.0, self._last_request + min_interval - self._clock())

    async def wait(self, min_interval: float) -> float:
        """Sleep until *min_interval* seconds have passed since the last request.

        Returns the number of seconds slept (0 when the gap is already large enough).
        """
        delay = self.remaining(min_interval)
        if delay > 0:
            self.logger.debug(f"Politeness wait {delay:.2f}s")
            await self._sleep(delay)
        return delay


__all__ = ["MinIntervalRateLimiter"]
