"""
Differential Drive Kinematics

This module maps between chassis-level velocity and the independent linear
velocities of the two sides of a differential drivetrain.

Mathematical Model:
    Instantaneous Center of Rotation (ICR) kinematics with track width L:

        Forward kinematics (wheels -> chassis):
            vx = (v_L + v_R) / 2
            vy = 0
            ω  = (v_R - v_L) / L

        Inverse kinematics (chassis -> wheels):
            v_L = vx - ω L / 2
            v_R = vx + ω L / 2

    The two maps are exact algebraic inverses when vy = 0. A differential
    drive cannot translate sideways, so vy is ignored on the inverse map.

Coordinate Frames:
    - Body frame: x-forward, y-left, counter-clockwise positive rotation
"""

from ..exceptions import InvalidParameterError
from ..geometry import Twist2d
from .speeds import ChassisSpeeds, DifferentialDriveWheelSpeeds


class DifferentialDriveKinematics:
    """
    Bidirectional chassis/wheel velocity mapping for a differential drive.

    Attributes:
        track_width: Distance between the left and right wheel contact lines [m]
    """

    def __init__(self, track_width: float):
        """
        Args:
            track_width: Distance between wheel contact lines [m]

        Raises:
            InvalidParameterError: If track_width is not positive
        """
        if not track_width > 0:
            raise InvalidParameterError(f"Track width must be positive, got {track_width}")

        self.track_width = float(track_width)
        self._half_track_width = self.track_width / 2.0

    def to_chassis_speeds(self, wheel_speeds: DifferentialDriveWheelSpeeds) -> ChassisSpeeds:
        """
        Forward kinematics: wheel velocities to chassis velocity.

        Args:
            wheel_speeds: Left and right wheel velocities [m/s]

        Returns:
            Chassis speeds with vy = 0
        """
        return ChassisSpeeds(
            (wheel_speeds.left + wheel_speeds.right) / 2.0,
            0.0,
            (wheel_speeds.right - wheel_speeds.left) / self.track_width,
        )

    def to_wheel_speeds(self, chassis_speeds: ChassisSpeeds) -> DifferentialDriveWheelSpeeds:
        """
        Inverse kinematics: chassis velocity to wheel velocities.

        Args:
            chassis_speeds: Desired chassis motion; vy is ignored

        Returns:
            Left and right wheel velocities [m/s]
        """
        return DifferentialDriveWheelSpeeds(
            chassis_speeds.vx - chassis_speeds.omega * self._half_track_width,
            chassis_speeds.vx + chassis_speeds.omega * self._half_track_width,
        )

    def to_twist2d(self, left_distance: float, right_distance: float) -> Twist2d:
        """
        Arc traveled by the chassis for the given wheel distance deltas.

        Args:
            left_distance: Change in left wheel distance [m]
            right_distance: Change in right wheel distance [m]
        """
        return Twist2d(
            (left_distance + right_distance) / 2.0,
            0.0,
            (right_distance - left_distance) / self.track_width,
        )

    def __repr__(self) -> str:
        return f"DifferentialDriveKinematics(track_width={self.track_width:.3f}m)"
