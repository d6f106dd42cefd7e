"""Tests for pointer hit-testing, dragging and double-tap reset."""

from bezier_rope.interaction import DoubleTapDetector, InteractionController
from bezier_rope.models import HandleId, Vector2
from bezier_rope.simulation import CurveSimulation

DT = 1.0 / 60.0


def test_drag_keeps_grip_offset(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)

    session = controller.pointer_down(Vector2(270, 265))
    assert session is not None
    assert session.handle_id is HandleId.HANDLE1
    assert session.pointer_offset == Vector2(-6, -5)
    assert sim.dragged_handle is HandleId.HANDLE1

    controller.pointer_move(Vector2(300, 300))
    assert sim.state.p1.position == Vector2(294, 295)
    assert sim.state.p1.velocity == Vector2(0, 0)


def test_miss_starts_no_drag(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    assert controller.pointer_down(Vector2(10, 10)) is None

    controller.pointer_move(Vector2(264, 260))
    assert sim.dragged_handle is None
    assert sim.state.p1.position == Vector2(264, 260)


def test_capture_radius_is_strict(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    # exactly 30 away from P1
    assert controller.hit_test(Vector2(294, 260)) is None
    assert controller.hit_test(Vector2(293.9, 260)) is HandleId.HANDLE1


def test_handle1_wins_when_both_in_range(sim: CurveSimulation) -> None:
    sim.state.p2.position = Vector2(270, 260)
    controller = InteractionController(sim)
    assert controller.hit_test(Vector2(268, 260)) is HandleId.HANDLE1


def test_handle2_is_grabbable(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    session = controller.pointer_down(Vector2(520, 345))
    assert session.handle_id is HandleId.HANDLE2
    controller.pointer_move(Vector2(400, 400))
    assert sim.state.p2.position == Vector2(408, 395)


def test_release_hands_handle_back_to_physics(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    controller.pointer_down(Vector2(264, 260))
    controller.pointer_move(Vector2(264, 100))
    controller.pointer_up()

    assert controller.session is None
    assert sim.dragged_handle is None
    assert sim.state.p1.velocity == Vector2(0, 0)

    sim.tick(DT)
    assert sim.state.p1.position.y > 100


def test_cancel_ends_drag(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    controller.pointer_down(Vector2(264, 260))
    controller.pointer_cancel()
    assert sim.dragged_handle is None

    controller.pointer_move(Vector2(0, 0))
    assert sim.state.p1.position == Vector2(264, 260)


def test_double_tap_resets_positions(sim: CurveSimulation) -> None:
    for _ in range(30):
        sim.tick(DT)
    assert sim.state.p1.position != Vector2(264, 260)

    controller = InteractionController(sim)
    tap = Vector2(100, 500)
    controller.pointer_down(tap, 1.00)
    controller.pointer_up(tap, 1.05)
    controller.pointer_down(tap, 1.15)
    controller.pointer_up(tap, 1.20)

    assert sim.state.p1.position == Vector2(264, 260)
    assert sim.state.p2.position == Vector2(528, 340)


def test_slow_taps_do_not_reset(sim: CurveSimulation) -> None:
    for _ in range(30):
        sim.tick(DT)
    moved = sim.state.p1.position.copy()

    controller = InteractionController(sim)
    tap = Vector2(100, 500)
    controller.pointer_down(tap, 1.0)
    controller.pointer_up(tap, 1.05)
    controller.pointer_down(tap, 2.0)
    controller.pointer_up(tap, 2.05)

    assert sim.state.p1.position == moved


def test_detector_ignores_long_presses_and_far_taps() -> None:
    detector = DoubleTapDetector(window=0.3, slop=30)

    detector.press(Vector2(0, 0), 0.0)
    assert not detector.release(Vector2(0, 0), 0.5)  # held too long
    detector.press(Vector2(0, 0), 0.6)
    assert not detector.release(Vector2(0, 0), 0.65)

    detector.press(Vector2(200, 0), 0.7)
    assert not detector.release(Vector2(200, 0), 0.75)  # too far from the first tap

    detector.press(Vector2(205, 0), 0.8)
    assert detector.release(Vector2(205, 0), 0.85)

    # A third tap starts over
    detector.press(Vector2(205, 0), 0.9)
    assert not detector.release(Vector2(205, 0), 0.95)


def test_release_without_press_is_not_a_tap() -> None:
    detector = DoubleTapDetector()
    assert not detector.release(Vector2(0, 0), 0.0)


def test_drag_sessions_and_points_are_hashable(sim: CurveSimulation) -> None:
    controller = InteractionController(sim)
    session = controller.pointer_down(Vector2(270, 265))
    assert session in {session}

    points = {Vector2(1, 2), Vector2(1, 2), Vector2(2, 1)}
    assert len(points) == 2
