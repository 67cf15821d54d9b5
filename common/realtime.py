"""
Clock utilities shared by the controller, its force-error calculator and the log throttle.
"""

from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


def monotonic_time() -> float:
    """Return monotonic time in seconds."""
    return time.monotonic()


class ElapsedTimer:
    """
    Measure the time between successive calls to elapsed().
    The first call after construction or reset() returns 0.0.
    """

    def __init__(self, clock: Clock = monotonic_time):
        self.clock = clock
        self._last: float | None = None

    def reset(self) -> None:
        self._last = None

    def elapsed(self) -> float:
        now = self.clock()
        dt = 0.0 if self._last is None else now - self._last
        self._last = now
        return max(dt, 0.0)
