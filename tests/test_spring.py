"""Tests for the semi-implicit Euler spring step."""

import math

import pytest

from bezier_rope.models import SpringHandle, Vector2
from bezier_rope.spring import advance, advance_handle

DT = 1.0 / 60.0


def test_zero_dt_is_a_no_op() -> None:
    pos, vel = advance(Vector2(10, 20), Vector2(3, -4), 1.0, Vector2(0, 0), 0.0, 80.0, 12.0)
    assert pos == Vector2(10, 20)
    assert vel == Vector2(3, -4)


def test_single_step_updates_velocity_before_position() -> None:
    pos, vel = advance(Vector2(100, 0), Vector2(0, 0), 1.0, Vector2(0, 0), DT, 80.0, 12.0)
    # a = -80 * 100 = -8000, v' = a * dt, x' = x + v' * dt
    assert vel.x == pytest.approx(-8000.0 * DT)
    assert pos.x == pytest.approx(100.0 - 8000.0 * DT * DT)
    assert vel.y == 0.0 and pos.y == 0.0


def test_axes_are_independent() -> None:
    pos, vel = advance(Vector2(5, -7), Vector2(1, 2), 1.0, Vector2(5, 0), DT, 80.0, 12.0)
    # x sits on target: only damping acts
    assert vel.x == pytest.approx(1.0 - 12.0 * 1.0 * DT)
    assert vel.y == pytest.approx(2.0 + (80.0 * 7.0 - 12.0 * 2.0) * DT)


def test_heavier_mass_accelerates_less() -> None:
    _, light = advance(Vector2(50, 0), Vector2(0, 0), 1.0, Vector2(0, 0), DT, 80.0, 12.0)
    _, heavy = advance(Vector2(50, 0), Vector2(0, 0), 4.0, Vector2(0, 0), DT, 80.0, 12.0)
    assert heavy.x == pytest.approx(light.x / 4.0)


def test_overdamped_error_strictly_decreases() -> None:
    """damping^2 >= 4 k m: no overshoot, the gap closes every step."""
    stiffness, damping = 80.0, 20.0
    assert damping**2 >= 4 * stiffness * 1.0

    target = Vector2(0, 0)
    pos, vel = Vector2(100, 0), Vector2(0, 0)
    previous = pos.distance_to(target)
    for _ in range(600):
        pos, vel = advance(pos, vel, 1.0, target, DT, stiffness, damping)
        error = pos.distance_to(target)
        assert error < previous
        previous = error
    assert previous < 1e-3


def test_default_constants_settle_on_target() -> None:
    """80 / 12 is underdamped: it overshoots a little but settles."""
    target = Vector2(30, -40)
    pos, vel = Vector2(130, -40), Vector2(0, 0)
    peak_after_first_second = 0.0
    for step in range(300):
        pos, vel = advance(pos, vel, 1.0, target, DT, 80.0, 12.0)
        if step >= 60:
            peak_after_first_second = max(peak_after_first_second, pos.distance_to(target))
    assert peak_after_first_second < 5.0
    assert pos.distance_to(target) < 1e-3
    assert math.isfinite(vel.x)


def test_advance_handle_mutates_in_place() -> None:
    handle = SpringHandle(100, 0)
    advance_handle(handle, Vector2(0, 0), DT, 80.0, 12.0)
    assert handle.position.x < 100
    assert handle.velocity.x < 0


def test_handle_rejects_non_positive_mass() -> None:
    with pytest.raises(ValueError):
        SpringHandle(mass=0.0)
