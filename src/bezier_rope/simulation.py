# simulation.py
"""
Spring-driven Bezier rope.

P0 and P3 are anchors laid out from the viewport. P1 and P2 are spring
handles chasing targets on the midline, pushed around by device tilt. A
handle under drag is placed directly by the interaction layer and skipped
by the integrator until it is released.
"""

from __future__ import annotations

import threading

from bezier_rope import config
from bezier_rope.curve import control_array, sample_array, tangent_rays
from bezier_rope.models import (
    ControlPoint,
    ControlRole,
    CurveState,
    HandleId,
    MotionSample,
    RenderFrame,
    Vector2,
)
from bezier_rope.motion import MotionSource, NullMotionSource, offset_2d
from bezier_rope.spring import advance_handle


class CurveSimulation:
    def __init__(
        self,
        width: float,
        height: float,
        motion: MotionSource | None = None,
        stiffness: float = config.STIFFNESS,
        damping: float = config.DAMPING,
        mass: float = config.HANDLE_MASS,
    ) -> None:
        self.motion: MotionSource = motion if motion is not None else NullMotionSource()
        self.state = CurveState(mass=mass)

        # Tunable at runtime
        self.stiffness = stiffness
        self.damping = damping
        self.motion_enabled = True

        self.width = 0.0
        self.height = 0.0
        self.targets = (Vector2.zero(), Vector2.zero())

        self.running = False
        self.dirty = False
        self.tick_count = 0
        self.instability_count = 0

        # Guards state against a tick racing stop() or input from another thread
        self._lock = threading.RLock()

        self._set_bounds(width, height)
        self._layout()
        self.targets = self.compute_targets(Vector2.zero())

    # ------------------------
    # Lifecycle
    # ------------------------

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self.motion.start_updates()
            self.running = True
            self.dirty = True
        print("[Simulation] Started")

    def stop(self) -> None:
        """Safe at any time; no tick mutates state once this returns."""
        with self._lock:
            if not self.running:
                return
            self.running = False
            self.motion.stop_updates()
        print(f"[Simulation] Stopped after {self.tick_count} ticks")

    def teardown(self) -> None:
        self.stop()
        self.motion.teardown()

    # ------------------------
    # Layout
    # ------------------------

    def on_resize(self, width: float, height: float) -> None:
        with self._lock:
            self._set_bounds(width, height)
            self._layout()
        print(f"[Simulation] Resized to {width:.0f}x{height:.0f}")

    def reset_positions(self) -> None:
        """
        Put anchors and handles back at their default layout.

        An active drag stays active: the dragged handle jumps to its default
        spot and the next move event snaps it back under the pointer.
        """
        with self._lock:
            self._layout()
        print("[Simulation] Reset")

    def _set_bounds(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)

    def _layout(self) -> None:
        w, h = self.width, self.height
        center_y = h / 2

        self.state.p0 = Vector2(config.ANCHOR_MARGIN, center_y)
        self.state.p3 = Vector2(w - config.ANCHOR_MARGIN, center_y)

        self.state.p1.place(
            Vector2(w * config.HANDLE1_FRACTION, center_y - config.HANDLE_VERTICAL_OFFSET)
        )
        self.state.p2.place(
            Vector2(w * config.HANDLE2_FRACTION, center_y + config.HANDLE_VERTICAL_OFFSET)
        )
        self.dirty = True

    # ------------------------
    # Physics
    # ------------------------

    def read_offset(self) -> Vector2:
        if not self.motion_enabled:
            return Vector2.zero()
        sample: MotionSample = self.motion.latest()
        return offset_2d(sample, config.MOTION_SCALE)

    def compute_targets(self, offset: Vector2) -> tuple[Vector2, Vector2]:
        p0, p3 = self.state.p0, self.state.p3
        mid_y = (p0.y + p3.y) * 0.5

        base1 = Vector2((p0.x + p3.x) * config.TARGET1_FRACTION, mid_y)
        base2 = Vector2((p0.x + p3.x) * config.TARGET2_FRACTION, mid_y)

        return (
            base1 + offset * config.HANDLE1_MOTION_WEIGHT,
            base2 + offset * config.HANDLE2_MOTION_WEIGHT,
        )

    def tick(self, dt: float) -> None:
        """Advance one frame. Does nothing unless started."""
        with self._lock:
            if not self.running:
                return

            dt = max(0.0, min(dt, config.MAX_DT))

            # One motion read per tick so both targets see the same tilt
            self.targets = self.compute_targets(self.read_offset())

            for (handle_id, handle), target in zip(self.state.handles(), self.targets):
                if handle_id is self.state.dragged_handle:
                    continue
                advance_handle(handle, target, dt, self.stiffness, self.damping)

            if not self._is_finite():
                self.instability_count += 1
                print("[Simulation] Warning: handles became unstable, resetting")
                print(f"  Stiffness: {self.stiffness:.2f}  Damping: {self.damping:.2f}")
                self._recover()

            self.tick_count += 1
            self.dirty = True

    def _recover(self) -> None:
        """Reset the layout, leaving a dragged handle where the pointer put it."""
        dragged = self.state.dragged_handle
        held = self.state.handle(dragged).position.copy() if dragged is not None else None
        self._layout()
        if held is not None and held.is_finite():
            self.state.handle(dragged).place(held)

    def _is_finite(self) -> bool:
        return all(
            handle.position.is_finite() and handle.velocity.is_finite()
            for _, handle in self.state.handles()
        )

    # ------------------------
    # Drag commands
    # ------------------------

    @property
    def dragged_handle(self) -> HandleId | None:
        return self.state.dragged_handle

    def handle_position(self, handle_id: HandleId) -> Vector2:
        with self._lock:
            return self.state.handle(handle_id).position.copy()

    def begin_drag(self, handle_id: HandleId) -> None:
        """Ignored unless handle_id names one of the two handles."""
        if not isinstance(handle_id, HandleId):
            return
        with self._lock:
            self.state.dragged_handle = handle_id
            self.state.handle(handle_id).velocity = Vector2.zero()

    def drag_to(self, position: Vector2) -> bool:
        """Place the dragged handle. False if nothing is being dragged."""
        with self._lock:
            handle_id = self.state.dragged_handle
            if handle_id is None:
                return False
            self.state.handle(handle_id).place(position)
            self.dirty = True
            return True

    def end_drag(self) -> None:
        with self._lock:
            handle_id = self.state.dragged_handle
            if handle_id is None:
                return
            # Released from where it was dropped, no throw velocity
            self.state.handle(handle_id).velocity = Vector2.zero()
            self.state.dragged_handle = None

    # ------------------------
    # Output
    # ------------------------

    def frame(self, step: float = config.SAMPLE_STEP, every: int = config.TANGENT_EVERY) -> RenderFrame:
        """Snapshot for the renderer. Clears the dirty flag."""
        with self._lock:
            p0, p1, p2, p3 = (p.copy() for p in self.state.control_points())
            targets = (self.targets[0].copy(), self.targets[1].copy())
            dragged = self.state.dragged_handle
            dirty = self.dirty
            self.dirty = False

        control = control_array(p0, p1, p2, p3)
        polyline = sample_array(control, step)
        origins, directions = tangent_rays(control, polyline, step, every)

        return RenderFrame(
            polyline=polyline,
            tangent_origins=origins,
            tangent_directions=directions,
            control_points=[
                ControlPoint(ControlRole.ANCHOR_START, p0),
                ControlPoint(ControlRole.ANCHOR_END, p3),
                ControlPoint(ControlRole.HANDLE1, p1),
                ControlPoint(ControlRole.HANDLE2, p2),
            ],
            targets=targets,
            dragged_handle=dragged,
            dirty=dirty,
        )
