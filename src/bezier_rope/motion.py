# motion.py
"""
Device-orientation input.

A motion source publishes MotionSample values from its own thread into a
SampleSlot. The simulation only ever reads the most recent sample; there is
no queue, so a stale read for one frame is fine and fixes itself next frame.
"""

from __future__ import annotations

from collections.abc import Callable
import math
import threading
import time
from typing import Protocol

from bezier_rope.config import MOTION_SCALE, MOTION_UPDATE_HZ
from bezier_rope.models import MotionSample, Vector2


def offset_2d(sample: MotionSample, scale: float = MOTION_SCALE) -> Vector2:
    """Roll moves right, pitch moves up. No smoothing."""
    return Vector2(sample.roll * scale, -sample.pitch * scale)


class SampleSlot:
    """Single-writer / single-reader holder for the latest sample."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sample = MotionSample()

    def store(self, sample: MotionSample) -> None:
        with self._lock:
            self._sample = sample

    def load(self) -> MotionSample:
        with self._lock:
            return self._sample


class MotionSource(Protocol):
    available: bool

    def start_updates(self) -> None: ...

    def stop_updates(self) -> None: ...

    def latest(self) -> MotionSample: ...

    def teardown(self) -> None: ...


class NullMotionSource:
    """Sensor unavailable: updates never arrive, the sample stays level."""

    available = False

    def __init__(self) -> None:
        self.slot = SampleSlot()

    def start_updates(self) -> None:
        print("[Motion] No sensor available, tilt offset stays at (0, 0)")

    def stop_updates(self) -> None:
        pass

    def latest(self) -> MotionSample:
        return self.slot.load()

    def teardown(self) -> None:
        pass


class TiltEmulator:
    """
    Stand-in for a gyroscope on desktop.

    Keys set a desired attitude; read() eases the reported attitude toward it
    so tilting looks like a device being turned rather than a step input.
    """

    def __init__(self, max_angle: float = math.radians(45.0), ease: float = 0.15) -> None:
        self.max_angle = max_angle
        self.ease = ease
        self._lock = threading.Lock()
        self._desired = [0.0, 0.0]  # pitch, roll
        self._current = [0.0, 0.0]

    def nudge(self, d_pitch: float, d_roll: float) -> None:
        with self._lock:
            self._desired[0] = self._clamp(self._desired[0] + d_pitch)
            self._desired[1] = self._clamp(self._desired[1] + d_roll)

    def level(self) -> None:
        with self._lock:
            self._desired = [0.0, 0.0]

    def read(self) -> MotionSample:
        with self._lock:
            for i in range(2):
                self._current[i] += (self._desired[i] - self._current[i]) * self.ease
            pitch, roll = self._current
        return MotionSample(pitch=pitch, roll=roll, yaw=0.0)

    def _clamp(self, angle: float) -> float:
        return max(-self.max_angle, min(self.max_angle, angle))


class SimulatedMotionSource:
    """
    Polls a reader on a background thread at a fixed rate and publishes
    each reading to the slot, like a sensor delivering on its own queue.
    """

    available = True

    def __init__(
        self,
        reader: Callable[[], MotionSample],
        rate_hz: float = MOTION_UPDATE_HZ,
    ) -> None:
        self.reader = reader
        self.interval = 1.0 / rate_hz
        self.slot = SampleSlot()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start_updates(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._worker, name="motion-updates", daemon=True)
        self._thread.start()
        print(f"[Motion] Updates started at {1.0 / self.interval:.0f} Hz")

    def stop_updates(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=1.0)
        self._thread = None
        print("[Motion] Updates stopped")

    def latest(self) -> MotionSample:
        return self.slot.load()

    def teardown(self) -> None:
        self.stop_updates()
        self.slot.store(MotionSample())

    def _worker(self) -> None:
        last_time = time.perf_counter()
        while not self._stop.is_set():
            self.slot.store(self.reader())

            # Rate limiting to the update interval
            elapsed = time.perf_counter() - last_time
            self._stop.wait(max(0.0, self.interval - elapsed))
            last_time = time.perf_counter()
