"""
Feedback and feedforward controllers for robo motion.

Components:
    - PIDController: Discrete-time PID with tolerances and anti-windup
    - SimpleMotorFeedforward: kS/kV/kA motor voltage model
    - ElevatorFeedforward: Motor model with a gravity term
    - RamseteController: Nonlinear trajectory tracking for differential drives
"""

from .pid import PIDController
from .feedforward import SimpleMotorFeedforward, ElevatorFeedforward
from .ramsete import RamseteController

__all__ = [
    "PIDController",
    "SimpleMotorFeedforward",
    "ElevatorFeedforward",
    "RamseteController"
]
