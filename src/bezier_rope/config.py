"""
Tunables for the rope simulation.

Distances are in window pixels, time in seconds, angles in radians.
"""

# Spring physics
STIFFNESS = 80.0
DAMPING = 12.0
HANDLE_MASS = 1.0
MAX_DT = 1.0 / 30.0  # clamp for frame hitches

# Device motion
MOTION_SCALE = 120.0  # distance per radian of tilt
HANDLE1_MOTION_WEIGHT = 1.2
HANDLE2_MOTION_WEIGHT = 0.8
MOTION_UPDATE_HZ = 60.0

# Layout
ANCHOR_MARGIN = 40.0
HANDLE1_FRACTION = 0.33
HANDLE2_FRACTION = 0.66
HANDLE_VERTICAL_OFFSET = 40.0

# Target base points along the midline (0.25 / 0.75, not thirds)
TARGET1_FRACTION = 0.25
TARGET2_FRACTION = 0.75

# Interaction
CAPTURE_RADIUS = 30.0
DOUBLE_TAP_WINDOW = 0.3
DOUBLE_TAP_SLOP = 30.0

# Sampling / drawing
SAMPLE_STEP = 0.01
SAMPLE_EPSILON = 1e-6
TANGENT_EVERY = 8
TANGENT_LENGTH = 20.0
TARGET_FPS = 60

# Runtime tuning limits
STIFFNESS_RANGE = (1.0, 400.0)
DAMPING_RANGE = (0.0, 60.0)
