"""
Drivetrain kinematics for robo motion.

Components:
    - ChassisSpeeds: Robot-frame chassis velocity
    - DifferentialDriveWheelSpeeds: Per-side wheel velocity
    - DifferentialDriveKinematics: Chassis <-> wheel velocity mapping
    - DifferentialDriveOdometry: Encoder + gyro dead reckoning
"""

from .speeds import ChassisSpeeds, DifferentialDriveWheelSpeeds
from .differential_drive import DifferentialDriveKinematics
from .odometry import DifferentialDriveOdometry

__all__ = [
    "ChassisSpeeds",
    "DifferentialDriveWheelSpeeds",
    "DifferentialDriveKinematics",
    "DifferentialDriveOdometry"
]
