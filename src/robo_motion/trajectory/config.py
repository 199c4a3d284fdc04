"""
Trajectory generation configuration.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, List

from ..exceptions import InvalidParameterError
from ..kinematics import DifferentialDriveKinematics
from .constraint import DifferentialDriveKinematicsConstraint, TrajectoryConstraint


@dataclass
class TrajectoryConfig:
    """
    Limits and options for trajectory generation.

    Attributes:
        max_velocity: Global velocity limit [m/s]
        max_acceleration: Global acceleration limit [m/s²]
        start_velocity: Velocity at the start of the trajectory [m/s]
        end_velocity: Velocity at the end of the trajectory [m/s]
        reversed: Drive the path backwards
        constraints: Additional user constraints
    """

    max_velocity: float
    max_acceleration: float
    start_velocity: float = 0.0
    end_velocity: float = 0.0
    reversed: bool = False
    constraints: List[TrajectoryConstraint] = field(default_factory=list)

    def __post_init__(self):
        """Validate limits after initialization."""
        if not (self.max_velocity > 0 and math.isfinite(self.max_velocity)):
            raise InvalidParameterError(
                f"max_velocity must be positive and finite, got {self.max_velocity}")
        if not (self.max_acceleration > 0 and math.isfinite(self.max_acceleration)):
            raise InvalidParameterError(
                f"max_acceleration must be positive and finite, got {self.max_acceleration}")
        if self.start_velocity < 0 or self.end_velocity < 0:
            raise InvalidParameterError(
                "Start and end velocities are speeds along the path and must be non-negative; "
                "use reversed=True to drive backwards")

        self.constraints = list(self.constraints)

    def add_constraint(self, constraint: TrajectoryConstraint) -> "TrajectoryConfig":
        self.constraints.append(constraint)
        return self

    def add_constraints(self, constraints: Iterable[TrajectoryConstraint]) -> "TrajectoryConfig":
        self.constraints.extend(constraints)
        return self

    def set_kinematics(self, kinematics: DifferentialDriveKinematics) -> "TrajectoryConfig":
        """
        Keep both wheels below ``max_velocity`` by adding a kinematics constraint.
        """
        return self.add_constraint(
            DifferentialDriveKinematicsConstraint(kinematics, self.max_velocity))
