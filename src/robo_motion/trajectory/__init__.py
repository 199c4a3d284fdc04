"""
Trajectory generation and sampling.
"""

from .trajectory import Trajectory, TrajectoryState
from .spline import PoseWithCurvature
from .constraint import (
    TrajectoryConstraint,
    MinMax,
    MaxVelocityConstraint,
    CentripetalAccelerationConstraint,
    DifferentialDriveKinematicsConstraint,
    DifferentialDriveVoltageConstraint,
)
from .config import TrajectoryConfig
from .generator import TrajectoryGenerator

__all__ = [
    'Trajectory',
    'TrajectoryState',
    'PoseWithCurvature',
    'TrajectoryConstraint',
    'MinMax',
    'MaxVelocityConstraint',
    'CentripetalAccelerationConstraint',
    'DifferentialDriveKinematicsConstraint',
    'DifferentialDriveVoltageConstraint',
    'TrajectoryConfig',
    'TrajectoryGenerator',
]
