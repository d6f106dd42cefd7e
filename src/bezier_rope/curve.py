# curve.py
"""
Cubic Bezier evaluation.

    B(t)  = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3
    B'(t) = 3(1-t)^2 (P1-P0) + 6(1-t) t (P2-P1) + 3 t^2 (P3-P2)

The scalar functions work on Vector2 and are what the simulation and tests
use. The numba kernels produce the same values as (N, 2) arrays for the
renderer, which needs the whole polyline every frame.
"""

from numba import njit  # type: ignore
import numpy as np

from bezier_rope.config import SAMPLE_EPSILON, SAMPLE_STEP, TANGENT_EVERY
from bezier_rope.models import Vector2
from bezier_rope.types import CONTROL, POLYLINE


def evaluate_position(p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2, t: float) -> Vector2:
    """Point on the curve at t. t is not clamped."""
    mt = 1.0 - t
    mt2 = mt * mt
    mt3 = mt2 * mt
    t2 = t * t
    t3 = t2 * t

    x = mt3 * p0.x + 3.0 * mt2 * t * p1.x + 3.0 * mt * t2 * p2.x + t3 * p3.x
    y = mt3 * p0.y + 3.0 * mt2 * t * p1.y + 3.0 * mt * t2 * p2.y + t3 * p3.y
    return Vector2(x, y)


def derivative(p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2, t: float) -> Vector2:
    mt = 1.0 - t
    term1 = 3.0 * mt * mt
    term2 = 6.0 * mt * t
    term3 = 3.0 * t * t

    x = term1 * (p1.x - p0.x) + term2 * (p2.x - p1.x) + term3 * (p3.x - p2.x)
    y = term1 * (p1.y - p0.y) + term2 * (p2.y - p1.y) + term3 * (p3.y - p2.y)
    return Vector2(x, y)


def evaluate_tangent(p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2, t: float) -> Vector2:
    """Unit tangent at t, or the zero vector where the derivative vanishes."""
    return derivative(p0, p1, p2, p3, t).normalize()


def sample_parameters(step: float = SAMPLE_STEP) -> list[float]:
    """t = 0, step, 2*step, ... while t <= 1 + eps (accumulated, not multiplied)."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    ts = []
    t = 0.0
    while t <= 1.0 + SAMPLE_EPSILON:
        ts.append(t)
        t += step
    return ts


def sample(
    p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2, step: float = SAMPLE_STEP
) -> list[Vector2]:
    """Fresh polyline through the curve; recomputed on every call."""
    return [evaluate_position(p0, p1, p2, p3, t) for t in sample_parameters(step)]


def control_array(p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2) -> CONTROL:
    return np.array([[p.x, p.y] for p in (p0, p1, p2, p3)], dtype=np.float64)


# ===============================
# BATCH KERNELS
# ===============================


@njit(cache=True)  # type: ignore
def _sample_count(step: float) -> int:
    n = 0
    t = 0.0
    while t <= 1.0 + SAMPLE_EPSILON:
        n += 1
        t += step
    return n


@njit(cache=True)  # type: ignore
def sample_kernel(control: CONTROL, step: float) -> POLYLINE:
    """Positions at the same parameters as sample(), as an (N, 2) array."""
    n = _sample_count(step)
    out = np.empty((n, 2), dtype=np.float64)
    t = 0.0
    for i in range(n):
        mt = 1.0 - t
        b0 = mt * mt * mt
        b1 = 3.0 * mt * mt * t
        b2 = 3.0 * mt * t * t
        b3 = t * t * t
        for axis in range(2):
            out[i, axis] = (
                b0 * control[0, axis]
                + b1 * control[1, axis]
                + b2 * control[2, axis]
                + b3 * control[3, axis]
            )
        t += step
    return out


@njit(cache=True)  # type: ignore
def tangent_kernel(control: CONTROL, step: float, every: int) -> POLYLINE:
    """Unit tangents at every `every`-th sample parameter."""
    n = _sample_count(step)
    count = (n + every - 1) // every
    out = np.zeros((count, 2), dtype=np.float64)
    t = 0.0
    k = 0
    for i in range(n):
        if i % every == 0:
            mt = 1.0 - t
            d1 = 3.0 * mt * mt
            d2 = 6.0 * mt * t
            d3 = 3.0 * t * t
            dx = (
                d1 * (control[1, 0] - control[0, 0])
                + d2 * (control[2, 0] - control[1, 0])
                + d3 * (control[3, 0] - control[2, 0])
            )
            dy = (
                d1 * (control[1, 1] - control[0, 1])
                + d2 * (control[2, 1] - control[1, 1])
                + d3 * (control[3, 1] - control[2, 1])
            )
            length = np.sqrt(dx * dx + dy * dy)
            if length != 0.0:
                out[k, 0] = dx / length
                out[k, 1] = dy / length
            k += 1
        t += step
    return out


def sample_array(control: CONTROL, step: float = SAMPLE_STEP) -> POLYLINE:
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    return sample_kernel(np.ascontiguousarray(control, dtype=np.float64), float(step))


def tangent_rays(
    control: CONTROL,
    polyline: POLYLINE,
    step: float = SAMPLE_STEP,
    every: int = TANGENT_EVERY,
) -> tuple[POLYLINE, POLYLINE]:
    """(origins, unit directions) taken every `every` samples of the polyline."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    if every < 1:
        raise ValueError(f"every must be >= 1, got {every}")
    directions = tangent_kernel(
        np.ascontiguousarray(control, dtype=np.float64), float(step), int(every)
    )
    return polyline[::every].copy(), directions
