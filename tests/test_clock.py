"""Tests for frame scheduling with a manual clock."""

import pytest

from bezier_rope.clock import FrameScheduler, ManualClock, WallClock
from bezier_rope.config import MAX_DT
from bezier_rope.models import Vector2
from bezier_rope.simulation import CurveSimulation


class Recorder:
    def __init__(self) -> None:
        self.dts: list[float] = []

    def tick(self, dt: float) -> None:
        self.dts.append(dt)


def test_first_step_ticks_with_zero_dt() -> None:
    clock = ManualClock(start=10.0)
    recorder = Recorder()
    scheduler = FrameScheduler(recorder, clock)

    scheduler.step()
    clock.advance(0.016)
    scheduler.step()
    clock.advance(0.020)
    scheduler.step()

    assert recorder.dts[0] == 0.0
    assert recorder.dts[1:] == pytest.approx([0.016, 0.020])


def test_reset_forgets_previous_timestamp() -> None:
    clock = ManualClock()
    recorder = Recorder()
    scheduler = FrameScheduler(recorder, clock)

    scheduler.step()
    clock.advance(3.0)
    scheduler.reset()
    scheduler.step()
    assert recorder.dts == [0.0, 0.0]


def test_wall_clock_moves_forward() -> None:
    clock = WallClock()
    assert clock.now() <= clock.now()


def test_scheduler_drives_simulation_with_clamped_hitches() -> None:
    clock = ManualClock()
    driven = CurveSimulation(800, 600)
    reference = CurveSimulation(800, 600)
    driven.start()
    reference.start()

    scheduler = FrameScheduler(driven, clock)
    scheduler.step()
    assert driven.state.p1.position == Vector2(264, 260)

    clock.advance(2.0)  # app was backgrounded
    scheduler.step()
    reference.tick(MAX_DT)

    assert driven.state.p1.position == reference.state.p1.position
    assert driven.tick_count == 2
