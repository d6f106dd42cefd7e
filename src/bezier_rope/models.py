# models.py
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
import math

import numpy as np


class Vector2:
    __slots__ = ["x", "y"]

    def __init__(self, x: float, y: float) -> None:
        self.x, self.y = float(x), float(y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Vector2({self.x!r}, {self.y!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector2):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2:  # Handles: scalar * vector
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def copy(self) -> Vector2:
        return Vector2(self.x, self.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vector2:
        length = self.length()
        return self / length if length != 0 else Vector2(0, 0)

    def distance_to(self, other: Vector2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    @classmethod
    def zero(cls) -> Vector2:
        return cls(0.0, 0.0)


class HandleId(Enum):
    HANDLE1 = 1
    HANDLE2 = 2


class ControlRole(Enum):
    ANCHOR_START = "anchorStart"
    ANCHOR_END = "anchorEnd"
    HANDLE1 = "handle1"
    HANDLE2 = "handle2"


class SpringHandle:
    """Interior control point driven by the spring integrator."""

    def __init__(self, x: float = 0.0, y: float = 0.0, mass: float = 1.0) -> None:
        if mass <= 0:
            raise ValueError(f"mass must be positive, got {mass}")
        self.position = Vector2(x, y)
        self.velocity = Vector2.zero()
        self.mass = mass

    def place(self, position: Vector2) -> None:
        """Overwrite the position and drop any spring energy."""
        self.position = position.copy()
        self.velocity = Vector2.zero()


@dataclass(frozen=True)
class MotionSample:
    """Device attitude in radians."""

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0


@dataclass(frozen=True)
class DragSession:
    handle_id: HandleId
    pointer_offset: Vector2


class CurveState:
    """P0..P3 of the rope. Anchors are only touched by layout, never by physics."""

    def __init__(self, mass: float = 1.0) -> None:
        self.p0 = Vector2.zero()
        self.p3 = Vector2.zero()
        self.p1 = SpringHandle(mass=mass)
        self.p2 = SpringHandle(mass=mass)
        self.dragged_handle: HandleId | None = None

    def handle(self, handle_id: HandleId) -> SpringHandle:
        """Raises KeyError for anything that is not a HandleId."""
        return {HandleId.HANDLE1: self.p1, HandleId.HANDLE2: self.p2}[handle_id]

    def handles(self) -> tuple[tuple[HandleId, SpringHandle], ...]:
        return ((HandleId.HANDLE1, self.p1), (HandleId.HANDLE2, self.p2))

    def control_points(self) -> tuple[Vector2, Vector2, Vector2, Vector2]:
        return self.p0, self.p1.position, self.p2.position, self.p3


@dataclass(frozen=True)
class ControlPoint:
    role: ControlRole
    position: Vector2


@dataclass
class RenderFrame:
    """Everything the renderer needs for one frame."""

    polyline: np.ndarray
    tangent_origins: np.ndarray
    tangent_directions: np.ndarray
    control_points: list[ControlPoint]
    targets: tuple[Vector2, Vector2]
    dragged_handle: HandleId | None = None
    dirty: bool = True

    def control_point(self, role: ControlRole) -> Vector2:
        for point in self.control_points:
            if point.role is role:
                return point.position
        raise KeyError(role)
