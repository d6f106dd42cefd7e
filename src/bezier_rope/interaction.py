# interaction.py
"""
Pointer / touch handling for the rope.

The controller never writes curve state itself: it hit-tests against the
handles and issues begin/move/end drag commands to the simulation.
"""

from __future__ import annotations

from bezier_rope import config
from bezier_rope.models import DragSession, HandleId, Vector2
from bezier_rope.simulation import CurveSimulation


class DoubleTapDetector:
    """Recognises two short taps close together in time and space."""

    def __init__(
        self,
        window: float = config.DOUBLE_TAP_WINDOW,
        slop: float = config.DOUBLE_TAP_SLOP,
    ) -> None:
        self.window = window
        self.slop = slop
        self._down: tuple[Vector2, float] | None = None
        self._last_tap: tuple[Vector2, float] | None = None

    def press(self, location: Vector2, timestamp: float) -> None:
        self._down = (location.copy(), timestamp)

    def cancel(self) -> None:
        self._down = None
        self._last_tap = None

    def release(self, location: Vector2, timestamp: float) -> bool:
        """True when this release completes a double tap."""
        down, self._down = self._down, None
        if down is None:
            return False

        down_loc, down_time = down
        is_tap = (
            timestamp - down_time <= self.window
            and location.distance_to(down_loc) <= self.slop
        )
        if not is_tap:
            self._last_tap = None
            return False

        previous, self._last_tap = self._last_tap, (location.copy(), timestamp)
        if previous is None:
            return False

        prev_loc, prev_time = previous
        if timestamp - prev_time <= self.window and location.distance_to(prev_loc) <= self.slop:
            self._last_tap = None
            return True
        return False


class InteractionController:
    def __init__(
        self,
        simulation: CurveSimulation,
        capture_radius: float = config.CAPTURE_RADIUS,
        double_tap: DoubleTapDetector | None = None,
    ) -> None:
        self.simulation = simulation
        self.capture_radius = capture_radius
        self.double_tap = double_tap or DoubleTapDetector()
        self.session: DragSession | None = None

    def hit_test(self, location: Vector2) -> HandleId | None:
        """First handle (P1 before P2) strictly inside the capture radius."""
        for handle_id in (HandleId.HANDLE1, HandleId.HANDLE2):
            position = self.simulation.handle_position(handle_id)
            if location.distance_to(position) < self.capture_radius:
                return handle_id
        return None

    def pointer_down(self, location: Vector2, timestamp: float | None = None) -> DragSession | None:
        if timestamp is not None:
            self.double_tap.press(location, timestamp)

        handle_id = self.hit_test(location)
        if handle_id is None:
            self._clear()
            return None

        position = self.simulation.handle_position(handle_id)
        self.session = DragSession(handle_id, position - location)
        self.simulation.begin_drag(handle_id)
        return self.session

    def pointer_move(self, location: Vector2) -> None:
        if self.session is None:
            return
        self.simulation.drag_to(location + self.session.pointer_offset)

    def pointer_up(self, location: Vector2 | None = None, timestamp: float | None = None) -> None:
        self._clear()
        if location is not None and timestamp is not None:
            if self.double_tap.release(location, timestamp):
                self.on_double_tap()

    def pointer_cancel(self) -> None:
        self.double_tap.cancel()
        self._clear()

    def on_double_tap(self) -> None:
        self.simulation.reset_positions()

    def _clear(self) -> None:
        if self.session is not None:
            self.simulation.end_drag()
        self.session = None
