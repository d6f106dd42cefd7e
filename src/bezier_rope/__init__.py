"""
Bezier Rope

An interactive cubic Bezier curve whose two interior control points are
spring-driven handles, swayed by device tilt and draggable by pointer.
"""

from .curve import evaluate_position, evaluate_tangent, sample
from .models import CurveState, HandleId, MotionSample, SpringHandle, Vector2
from .simulation import CurveSimulation

__version__ = "0.1.0"

__all__ = [
    "Vector2",
    "SpringHandle",
    "CurveState",
    "HandleId",
    "MotionSample",
    "CurveSimulation",
    "evaluate_position",
    "evaluate_tangent",
    "sample",
]
