"""FIFO request scheduler enforcing a minimum interval between calls."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class RequestScheduler:
    """Runs calls one at a time, spaced by at least ``1 / requests_per_second``.

    Waiters are served in arrival order. The clock and sleep functions are
    injectable so tests can drive time explicitly.
    """

    def __init__(
        self,
        requests_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the scheduler.

        Args:
            requests_per_second: Maximum call rate, must be positive
            clock: Monotonic time source in seconds
            sleep: Coroutine used to wait

        """
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        self.min_interval = 1.0 / requests_per_second
        self._clock = clock
        self._sleep = sleep
        # asyncio.Lock wakes waiters in FIFO order
        self._lock = asyncio.Lock()
        self._last_request_time: float | None = None

    async def run(self, call: Callable[[], Awaitable[T]]) -> T:
        """Wait for this caller's turn and the interval, then run the call."""
        async with self._lock:
            if self._last_request_time is not None:
                elapsed = self._clock() - self._last_request_time
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)
            self._last_request_time = self._clock()
            return await call()
