"""
Dead-reckoning pose estimation for differential drive robots.

The odometry integrates wheel encoder distances and a gyro heading into a
field-relative pose. Each update treats the motion since the previous update
as a single constant-curvature arc:

    Δd = (Δd_L + Δd_R) / 2
    Δθ = θ_gyro(k) - θ_gyro(k-1)
    pose(k) = pose(k-1).exp(Twist2d(Δd, 0, Δθ))

The heading is taken from the gyro rather than from the wheel difference
because wheel slip corrupts the rotation far more than the distance.

References:
    - Siegwart, R., Nourbakhsh, I. R. (2004). Introduction to Autonomous Mobile Robots
"""

import logging
from typing import Optional

from ..geometry import Pose2d, Rotation2d, Twist2d

logger = logging.getLogger(__name__)


class DifferentialDriveOdometry:
    """
    Tracks a differential drive pose from encoder distances and gyro angle.

    Attributes:
        pose: Current field-relative pose estimate
    """

    def __init__(self, gyro_angle: Rotation2d, left_distance: float = 0.0,
                 right_distance: float = 0.0, initial_pose: Optional[Pose2d] = None):
        """
        Args:
            gyro_angle: Current gyro reading
            left_distance: Current left encoder distance [m]
            right_distance: Current right encoder distance [m]
            initial_pose: Starting pose, defaults to the origin
        """
        self._pose = initial_pose if initial_pose is not None else Pose2d()
        self._gyro_offset = self._pose.rotation - gyro_angle
        self._previous_angle = self._pose.rotation
        self._previous_left_distance = left_distance
        self._previous_right_distance = right_distance

    @property
    def pose(self) -> Pose2d:
        return self._pose

    def reset_position(self, gyro_angle: Rotation2d, left_distance: float,
                       right_distance: float, pose: Pose2d) -> None:
        """
        Reset the estimate to ``pose``.

        The gyro does not need to be zeroed; its current reading becomes the
        new offset reference.
        """
        self._pose = pose
        self._previous_angle = pose.rotation
        self._gyro_offset = pose.rotation - gyro_angle
        self._previous_left_distance = left_distance
        self._previous_right_distance = right_distance
        logger.debug(f"Odometry reset to {pose}")

    def update(self, gyro_angle: Rotation2d, left_distance: float,
               right_distance: float) -> Pose2d:
        """
        Integrate the motion since the previous call.

        Args:
            gyro_angle: Current gyro reading
            left_distance: Cumulative left encoder distance [m]
            right_distance: Cumulative right encoder distance [m]

        Returns:
            Updated pose estimate
        """
        delta_left = left_distance - self._previous_left_distance
        delta_right = right_distance - self._previous_right_distance

        self._previous_left_distance = left_distance
        self._previous_right_distance = right_distance

        angle = gyro_angle + self._gyro_offset

        new_pose = self._pose.exp(Twist2d(
            (delta_left + delta_right) / 2.0,
            0.0,
            (angle - self._previous_angle).radians,
        ))

        self._previous_angle = angle
        self._pose = Pose2d(new_pose.translation, angle)
        return self._pose
