import numpy as np
import numpy.typing  # noqa: F401

POLYLINE = np.typing.NDArray[np.float64]
CONTROL = np.typing.NDArray[np.float64]
VERTS = np.typing.NDArray[np.float32]
