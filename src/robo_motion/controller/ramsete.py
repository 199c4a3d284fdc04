"""
Ramsete nonlinear path-tracking controller for nonholonomic drivetrains.

Control Law:
    The pose error is the reference pose expressed in the robot's frame:

        (e_x, e_y, e_θ) = pose_ref relative to current_pose

    With reference velocities (v_ref, ω_ref) and tuning gains b > 0,
    0 < ζ < 1:

        k = 2 ζ sqrt(ω_ref² + b v_ref²)
        v = v_ref cos(e_θ) + k e_x
        ω = ω_ref + k e_θ + b v_ref sinc(e_θ) e_y

    where sinc(x) = sin(x)/x and sinc(0) = 1.

    Larger b converges more aggressively (like a proportional gain); larger ζ
    adds damping. b = 2.0 and ζ = 0.7 work well for most robots when
    distances are in meters and angles in radians.

References:
    - Samson, C. (1992). Velocity and torque feedback control of a
      nonholonomic cart
"""

import math
from typing import TYPE_CHECKING

from ..exceptions import InvalidParameterError
from ..geometry import Pose2d, Transform2d
from ..kinematics import ChassisSpeeds

if TYPE_CHECKING:
    from ..trajectory.trajectory import TrajectoryState


def _sinc(x: float) -> float:
    if abs(x) < 1e-9:
        return 1.0 - x * x / 6.0
    return math.sin(x) / x


class RamseteController:
    """
    Tracks a time-parameterized trajectory by correcting chassis velocity.

    Attributes:
        b: Convergence gain [rad²/m²], > 0
        zeta: Damping ratio [rad⁻¹], in (0, 1)
    """

    def __init__(self, b: float = 2.0, zeta: float = 0.7):
        if not b > 0:
            raise InvalidParameterError(f"Ramsete b must be positive, got {b}")
        if not 0 < zeta < 1:
            raise InvalidParameterError(f"Ramsete zeta must be in (0, 1), got {zeta}")

        self.b = b
        self.zeta = zeta

        self._pose_error = Transform2d()
        self._pose_tolerance = Transform2d()
        self._enabled = True

    def set_tolerance(self, pose_tolerance: Transform2d) -> None:
        """Per-axis tolerance used by ``at_reference``."""
        self._pose_tolerance = pose_tolerance

    def set_enabled(self, enabled: bool) -> None:
        """When disabled, ``calculate`` passes the reference velocities through."""
        self._enabled = enabled

    @property
    def pose_error(self) -> Transform2d:
        return self._pose_error

    def at_reference(self) -> bool:
        """True when every component of the last pose error is within tolerance."""
        error = self._pose_error
        tolerance = self._pose_tolerance
        return (abs(error.x) < tolerance.x
                and abs(error.y) < tolerance.y
                and abs(error.rotation.radians) < tolerance.rotation.radians)

    def calculate(self, current_pose: Pose2d, pose_ref: Pose2d,
                  linear_velocity_ref: float, angular_velocity_ref: float) -> ChassisSpeeds:
        """
        Corrective chassis speeds for the given reference.

        Args:
            current_pose: Measured robot pose
            pose_ref: Desired pose
            linear_velocity_ref: Desired linear velocity [m/s]
            angular_velocity_ref: Desired angular velocity [rad/s]

        Returns:
            ChassisSpeeds(v, 0, ω)
        """
        if not self._enabled:
            return ChassisSpeeds(linear_velocity_ref, 0.0, angular_velocity_ref)

        self._pose_error = pose_ref.relative_to(current_pose)

        e_x = self._pose_error.x
        e_y = self._pose_error.y
        e_theta = self._pose_error.rotation.radians
        v_ref = linear_velocity_ref
        omega_ref = angular_velocity_ref

        k = 2.0 * self.zeta * math.sqrt(omega_ref ** 2 + self.b * v_ref ** 2)

        return ChassisSpeeds(
            v_ref * self._pose_error.rotation.cos + k * e_x,
            0.0,
            omega_ref + k * e_theta + self.b * v_ref * _sinc(e_theta) * e_y,
        )

    def calculate_from_state(self, current_pose: Pose2d,
                             desired_state: "TrajectoryState") -> ChassisSpeeds:
        """
        Corrective chassis speeds for a sampled trajectory state.

        The reference angular velocity is v_ref * curvature.
        """
        return self.calculate(
            current_pose,
            desired_state.pose,
            desired_state.velocity,
            desired_state.velocity * desired_state.curvature,
        )

    def __repr__(self) -> str:
        return f"RamseteController(b={self.b}, zeta={self.zeta})"
