"""
Robo Motion: Planar Motion Math for Mobile Robots

A scientific Python package for describing, planning and simulating robot
motion in the plane.

This package implements:
- Immutable 2-D geometry (rotations, translations, poses, twists)
- Differential drive kinematics and odometry
- Spline-based trajectory generation with velocity/acceleration constraints
- PID, feedforward and Ramsete controllers
- State-space plant simulation with ZOH discretization and measurement noise
- Elevator and battery simulation
- Linear and moving-average signal filters

All angles are in radians; degrees appear only in the explicit
Rotation2d.from_degrees / Rotation2d.degrees conversions.
"""

from .exceptions import (
    RoboMotionError,
    InvalidParameterError,
    DimensionMismatchError,
    TrajectoryGenerationError,
)
from .geometry import Rotation2d, Translation2d, Pose2d, Transform2d, Twist2d
from .kinematics import (
    ChassisSpeeds,
    DifferentialDriveWheelSpeeds,
    DifferentialDriveKinematics,
    DifferentialDriveOdometry,
)
from .filter import LinearFilter, MovingAverageFilter, SinglePoleIIRFilter
from .controller import (
    PIDController,
    SimpleMotorFeedforward,
    ElevatorFeedforward,
    RamseteController,
)
from .trajectory import (
    Trajectory,
    TrajectoryState,
    TrajectoryConfig,
    TrajectoryGenerator,
)
from .system import LinearSystem, DCMotor, LinearSystemId
from .simulation import LinearSystemSim, ElevatorSim, BatterySim

# Optional visualization import (graceful failure if not available)
try:
    from .visualization.plotter import TrajectoryPlotter, plot_elevator_response
    _has_visualization = True
except ImportError:
    TrajectoryPlotter = None
    plot_elevator_response = None
    _has_visualization = False

__version__ = "1.0.0"
__author__ = "Robo Motion Team"

__all__ = [
    "RoboMotionError",
    "InvalidParameterError",
    "DimensionMismatchError",
    "TrajectoryGenerationError",
    "Rotation2d",
    "Translation2d",
    "Pose2d",
    "Transform2d",
    "Twist2d",
    "ChassisSpeeds",
    "DifferentialDriveWheelSpeeds",
    "DifferentialDriveKinematics",
    "DifferentialDriveOdometry",
    "LinearFilter",
    "MovingAverageFilter",
    "SinglePoleIIRFilter",
    "PIDController",
    "SimpleMotorFeedforward",
    "ElevatorFeedforward",
    "RamseteController",
    "Trajectory",
    "TrajectoryState",
    "TrajectoryConfig",
    "TrajectoryGenerator",
    "LinearSystem",
    "DCMotor",
    "LinearSystemId",
    "LinearSystemSim",
    "ElevatorSim",
    "BatterySim"
]

# Add visualization to __all__ only if available
if _has_visualization:
    __all__.extend(["TrajectoryPlotter", "plot_elevator_response"])
