# Role: Pacing guard for multi-query fan-out against a shared third-party API.
# Tracks the earliest time the next call may start; clock and sleep are injectable so pacing is testable
# without wall-clock waits. One instance per adapter invocation (no shared state between pipeline runs).

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional


class RateLimiter:
    def __init__(
        self,
        min_interval_s: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if min_interval_s < 0:
            raise ValueError("min_interval_s must be >= 0")
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._sleep = sleep
        self._next_allowed_at: Optional[float] = None
        self.waits: List[float] = []

    def wait(self) -> float:
        # Block until the guard allows the next call; returns the seconds waited.
        if self._next_allowed_at is None:
            return 0.0

        delay = self._next_allowed_at - self._clock()
        if delay <= 0:
            return 0.0

        self._sleep(delay)
        self.waits.append(delay)
        return delay

    def mark_done(self) -> None:
        # Key line: the interval counts from the END of the previous call, not its start.
        self._next_allowed_at = self._clock() + self.min_interval_s

    @contextmanager
    def slot(self) -> Iterator[None]:
        self.wait()
        try:
            yield
        finally:
            self.mark_done()
