# spring.py
"""
Mass-spring-damper step for a single 2D point.

Semi-implicit (symplectic) Euler: velocity is updated first and the new
velocity moves the position. Nothing here guards against underdamped
constants; overshoot is a tuning matter, and dt is clamped by the caller.
"""

from bezier_rope.models import SpringHandle, Vector2


def advance(
    position: Vector2,
    velocity: Vector2,
    mass: float,
    target: Vector2,
    dt: float,
    stiffness: float,
    damping: float,
) -> tuple[Vector2, Vector2]:
    """Return (position, velocity) after one step toward target."""
    if dt == 0:
        return position.copy(), velocity.copy()

    dx = position.x - target.x
    dy = position.y - target.y

    ax = (-stiffness * dx - damping * velocity.x) / mass
    ay = (-stiffness * dy - damping * velocity.y) / mass

    vx = velocity.x + ax * dt
    vy = velocity.y + ay * dt

    return Vector2(position.x + vx * dt, position.y + vy * dt), Vector2(vx, vy)


def advance_handle(
    handle: SpringHandle,
    target: Vector2,
    dt: float,
    stiffness: float,
    damping: float,
) -> None:
    """In-place variant used by the simulation."""
    handle.position, handle.velocity = advance(
        handle.position, handle.velocity, handle.mass, target, dt, stiffness, damping
    )
