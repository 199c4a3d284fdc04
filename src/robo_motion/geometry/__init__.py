"""
Planar geometry for robo motion.

This module contains the immutable value types used to describe where a robot
is and how it moves in the plane. All angles are in radians.

Components:
    - Rotation2d: Heading stored as a normalized (cos, sin) pair
    - Translation2d: 2-D position vector
    - Pose2d: Translation plus rotation, with SE(2) exp/log maps
    - Transform2d: Relative delta between two poses
    - Twist2d: Constant-curvature motion increment
"""

from .rotation import Rotation2d
from .translation import Translation2d
from .pose import Pose2d, Transform2d, Twist2d

__all__ = [
    "Rotation2d",
    "Translation2d",
    "Pose2d",
    "Transform2d",
    "Twist2d"
]
