"""
Rate Gate - Client-wide outbound request throttle.

Hands out one permit per 1/N seconds on a fixed tick schedule, shared by
every task using the same client. At most one unclaimed permit is kept,
so callers never burst above N.
"""

import asyncio
import logging
import math
import time
from typing import Optional

from dexpaprika.exceptions import ClientClosedError


logger = logging.getLogger(__name__)


class RateGate:
    """
    Ticking permit source.

    Ticks fall at created + k * interval (k >= 1). A caller that arrives
    after an unclaimed tick takes it immediately; otherwise it sleeps until
    the next tick. Waiters queue on an asyncio.Lock, and cancelling a
    waiting task (or a deadline around it) releases its place at once.
    """

    def __init__(self, permits_per_second: float) -> None:
        if permits_per_second <= 0:
            raise ValueError("permits_per_second must be > 0")
        self._interval = 1.0 / permits_per_second
        self._origin = time.monotonic()
        self._next_tick = self._origin + self._interval
        self._lock: Optional[asyncio.Lock] = None
        self._stopped_event: Optional[asyncio.Event] = None
        self._stopped = False
        self._granted = 0
        logger.info(f"[rate_gate] Initialized: {permits_per_second:g} permits/second")

    @property
    def interval(self) -> float:
        """Seconds between permits."""
        return self._interval

    @property
    def permits_granted(self) -> int:
        return self._granted

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def acquire(self) -> None:
        """
        Wait for the next permit.

        Raises:
            ClientClosedError: If the gate was stopped
            asyncio.CancelledError: If the waiting task is cancelled
        """
        if self._lock is None:
            self._lock = asyncio.Lock()
        if self._stopped_event is None:
            self._stopped_event = asyncio.Event()

        async with self._lock:
            if self._stopped:
                raise ClientClosedError("Rate gate is stopped")

            now = time.monotonic()
            wait_time = self._next_tick - now
            if wait_time > 0:
                logger.debug(f"[rate_gate] Waiting {wait_time:.3f}s for permit")
                try:
                    await asyncio.wait_for(self._stopped_event.wait(), wait_time)
                except asyncio.TimeoutError:
                    pass
                now = time.monotonic()

            if self._stopped:
                raise ClientClosedError("Rate gate is stopped")

            self._granted += 1
            self._next_tick = self._first_tick_after(max(now, self._next_tick))

    def _first_tick_after(self, now: float) -> float:
        elapsed = now - self._origin
        ticks = math.floor(elapsed / self._interval) + 1
        return self._origin + ticks * self._interval

    def stop(self) -> None:
        """Stop handing out permits."""
        if not self._stopped:
            self._stopped = True
            if self._stopped_event is not None:
                self._stopped_event.set()
            logger.info(f"[rate_gate] Stopped after {self._granted} permits")

    def __repr__(self) -> str:
        return f"<RateGate(interval={self._interval:.3f}s, stopped={self._stopped})>"
