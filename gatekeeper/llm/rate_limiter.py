"""Token-bucket rate limiter for AI review calls.

Implemented as a generic cell rate algorithm: the bucket holds up to
requests_per_minute tokens and refills one token every 60 / rpm seconds.
acquire() never fails; when the bucket is empty it suspends for exactly the
time until the next token is due. Clock and sleep are injectable so tests
can drive time deterministically.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60.0


class RateLimiter:
    """Suspend callers so that at most N requests start per minute."""

    def __init__(
        self,
        requests_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            requests_per_minute: Sustained rate and burst size (must be > 0)
            clock: Monotonic clock in seconds
            sleep: Coroutine function used to suspend

        Raises:
            ValueError: If requests_per_minute is not positive
        """
        if requests_per_minute <= 0:
            raise ValueError(f"requests_per_minute must be positive, got {requests_per_minute}")
        self.requests_per_minute = requests_per_minute
        self.interval = SECONDS_PER_MINUTE / requests_per_minute
        self._burst_tolerance = self.interval * (requests_per_minute - 1)
        self._clock = clock
        self._sleep = sleep
        # Theoretical arrival time of the next request
        self._tat: float | None = None
        self._lock = asyncio.Lock()

    def delay(self) -> float:
        """Seconds the next acquire() would wait (0.0 if a token is free)."""
        now = self._clock()
        tat = now if self._tat is None else max(self._tat, now)
        return max(0.0, tat - self._burst_tolerance - now)

    async def acquire(self) -> None:
        """Take one token, waiting for it if necessary."""
        async with self._lock:
            now = self._clock()
            tat = now if self._tat is None else max(self._tat, now)
            wait = tat - self._burst_tolerance - now
            self._tat = tat + self.interval
            if wait > 0:
                logger.info("Rate limit reached, waiting %.1fs for next AI review slot", wait)
                await self._sleep(wait)


__all__ = ["RateLimiter"]
