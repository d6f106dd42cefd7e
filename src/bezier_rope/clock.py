# clock.py
"""
Frame timing.

FrameScheduler turns clock readings into tick(dt) calls. The app drives it
with WallClock once per rendered frame; tests drive it with ManualClock so no
real time passes.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float: ...


class WallClock:
    def now(self) -> float:
        return time.perf_counter()


class ManualClock:
    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, dt: float) -> None:
        self._now += dt


class Tickable(Protocol):
    def tick(self, dt: float) -> None: ...


class FrameScheduler:
    """Calls target.tick with the wall-clock delta since the previous step."""

    def __init__(self, target: Tickable, clock: Clock | None = None) -> None:
        self.target = target
        self.clock = clock or WallClock()
        self._last: float | None = None

    def reset(self) -> None:
        """Forget the previous timestamp; the next step ticks with dt = 0."""
        self._last = None

    def step(self) -> float:
        now = self.clock.now()
        dt = 0.0 if self._last is None else now - self._last
        self._last = now
        self.target.tick(dt)
        return dt
