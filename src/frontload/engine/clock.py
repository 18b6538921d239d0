# src/frontload/engine/clock.py
"""Clock used by the render-pass coordinator to time each flush.

The coordinator reads the clock exactly twice per flushed pass (before and
after awaiting the flush), so PassRecord.flush_seconds is the difference of
two consecutive readings.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def monotonic(self) -> float: ...


class SystemClock:
    """time.monotonic(); the default."""

    def monotonic(self) -> float:
        return time.monotonic()


class MockClock:
    """Deterministic clock that moves forward by `step` on every reading.

    With step=0.25 every flushed pass records flush_seconds == 0.25, no
    matter how long the fetches really took.
    """

    def __init__(self, start: float = 0.0, step: float = 0.0) -> None:
        if step < 0:
            raise ValueError(f"MockClock step must not be negative, got {step}")
        self._now = start
        self._step = step

    def monotonic(self) -> float:
        reading = self._now
        self._now += self._step
        return reading


DEFAULT_CLOCK: Clock = SystemClock()
