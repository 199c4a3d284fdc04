"""
Trajectory constraints.

A constraint limits the velocity and acceleration the time parameterization
may assign at a path point. Each constraint is asked two questions for every
point (pose, curvature, velocity):

    max_velocity(...)          -> upper bound on the path velocity [m/s]
    min_max_acceleration(...)  -> (min, max) acceleration bounds [m/s²]

Bounds from all constraints are intersected, together with the global
velocity and acceleration limits of the TrajectoryConfig.
"""

import math
from abc import ABC, abstractmethod
from typing import NamedTuple

from ..exceptions import InvalidParameterError
from ..geometry import Pose2d
from ..kinematics import ChassisSpeeds, DifferentialDriveKinematics
from ..math_util import sgn
from ..controller.feedforward import SimpleMotorFeedforward


class MinMax(NamedTuple):
    """Acceleration bounds [m/s²]."""

    min_acceleration: float = -math.inf
    max_acceleration: float = math.inf


class TrajectoryConstraint(ABC):
    """Base class for user-defined trajectory constraints."""

    @abstractmethod
    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        """
        Upper bound on velocity at this point.

        Args:
            pose: Pose at the point
            curvature: Path curvature [rad/m]
            velocity: Velocity bound computed so far [m/s]
        """

    @abstractmethod
    def min_max_acceleration(self, pose: Pose2d, curvature: float, velocity: float) -> MinMax:
        """Acceleration bounds at this point for the given velocity."""


class MaxVelocityConstraint(TrajectoryConstraint):
    """Caps the path velocity at a fixed value."""

    def __init__(self, max_velocity: float):
        if not max_velocity > 0:
            raise InvalidParameterError(f"Max velocity must be positive, got {max_velocity}")
        self._max_velocity = max_velocity

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        return self._max_velocity

    def min_max_acceleration(self, pose: Pose2d, curvature: float, velocity: float) -> MinMax:
        return MinMax()


class CentripetalAccelerationConstraint(TrajectoryConstraint):
    """
    Limits centripetal acceleration a_c = v² |κ|, slowing the robot down on
    tight turns:

        v_max = sqrt(a_c,max / |κ|)
    """

    def __init__(self, max_centripetal_acceleration: float):
        if not max_centripetal_acceleration > 0:
            raise InvalidParameterError(
                f"Max centripetal acceleration must be positive, got {max_centripetal_acceleration}")
        self._max_centripetal_acceleration = max_centripetal_acceleration

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        if curvature == 0:
            return math.inf
        return math.sqrt(self._max_centripetal_acceleration / abs(curvature))

    def min_max_acceleration(self, pose: Pose2d, curvature: float, velocity: float) -> MinMax:
        return MinMax()


class DifferentialDriveKinematicsConstraint(TrajectoryConstraint):
    """
    Keeps both wheels of a differential drive below a maximum speed.

    The chassis velocity at a point is found by desaturating the wheel speeds
    required to follow the path's curvature.
    """

    def __init__(self, kinematics: DifferentialDriveKinematics, max_speed: float):
        if not max_speed > 0:
            raise InvalidParameterError(f"Max wheel speed must be positive, got {max_speed}")
        self.kinematics = kinematics
        self.max_speed = max_speed

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        wheel_speeds = self.kinematics.to_wheel_speeds(
            ChassisSpeeds(velocity, 0.0, velocity * curvature))
        wheel_speeds = wheel_speeds.desaturate(self.max_speed)
        return self.kinematics.to_chassis_speeds(wheel_speeds).vx

    def min_max_acceleration(self, pose: Pose2d, curvature: float, velocity: float) -> MinMax:
        return MinMax()


class DifferentialDriveVoltageConstraint(TrajectoryConstraint):
    """
    Limits velocity and acceleration so neither side of a differential drive
    needs more than ``max_voltage`` according to its feedforward model.

    On a turn of radius r = 1/|κ| the outer wheel travels on radius r + T/2,
    so chassis motion relates to wheel motion by

        v_outer = v (1 + |κ| T / 2)       a_chassis = a_outer / (1 + |κ| T / 2)
        v_inner = v (1 - |κ| T / 2)       a_chassis = a_inner / (1 - |κ| T / 2)

    The chassis velocity is capped so the outer wheel never exceeds the
    steady-state speed reachable at ``max_voltage``. Below that cap each wheel
    can always hold its speed, so the acceleration bounds satisfy
    min <= 0 <= max.
    """

    def __init__(self, feedforward: SimpleMotorFeedforward,
                 kinematics: DifferentialDriveKinematics, max_voltage: float):
        if not max_voltage > 0:
            raise InvalidParameterError(f"Max voltage must be positive, got {max_voltage}")
        self.feedforward = feedforward
        self.kinematics = kinematics
        self.max_voltage = max_voltage

    def _half_track_curvature(self, curvature: float) -> float:
        return self.kinematics.track_width * abs(curvature) / 2.0

    def max_velocity(self, pose: Pose2d, curvature: float, velocity: float) -> float:
        max_wheel_speed = max(self.feedforward.max_achievable_velocity(self.max_voltage, 0.0), 0.0)
        return max_wheel_speed / (1.0 + self._half_track_curvature(curvature))

    def min_max_acceleration(self, pose: Pose2d, curvature: float, velocity: float) -> MinMax:
        wheel_speeds = self.kinematics.to_wheel_speeds(
            ChassisSpeeds(velocity, 0.0, velocity * curvature))

        max_wheel_speed = max(wheel_speeds.left, wheel_speeds.right)
        min_wheel_speed = min(wheel_speeds.left, wheel_speeds.right)

        max_wheel_acceleration = self.feedforward.max_achievable_acceleration(
            self.max_voltage, max_wheel_speed)
        min_wheel_acceleration = self.feedforward.min_achievable_acceleration(
            self.max_voltage, min_wheel_speed)

        half_track_curvature = self._half_track_curvature(curvature)

        # At standstill the wheel direction is arbitrary; pick the outer wheel
        if velocity == 0:
            max_chassis_acceleration = max_wheel_acceleration / (1.0 + half_track_curvature)
            min_chassis_acceleration = min_wheel_acceleration / (1.0 + half_track_curvature)
        else:
            direction = sgn(velocity)
            max_ratio = 1.0 + half_track_curvature * direction
            min_ratio = 1.0 - half_track_curvature * direction

            # A stationary inner wheel places no bound on the chassis
            max_chassis_acceleration = (max_wheel_acceleration / max_ratio
                                        if abs(max_ratio) > 1e-9 else math.inf)
            min_chassis_acceleration = (min_wheel_acceleration / min_ratio
                                        if abs(min_ratio) > 1e-9 else -math.inf)

        # Turning about a point inside the wheelbase reverses the inner wheel
        if half_track_curvature > 1.0:
            if velocity > 0:
                min_chassis_acceleration = -min_chassis_acceleration
            elif velocity < 0:
                max_chassis_acceleration = -max_chassis_acceleration

        return MinMax(min_chassis_acceleration, max_chassis_acceleration)
