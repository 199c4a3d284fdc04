"""
Mechanism simulation.

Components:
    - LinearSystemSim: Steps a LinearSystem with held inputs and noisy outputs
    - ElevatorSim: Elevator with gravity, hard stops and current draw
    - BatterySim: Loaded battery voltage
"""

from .linear_system_sim import LinearSystemSim, validate_time_step
from .elevator_sim import ElevatorSim
from .battery import BatterySim

__all__ = [
    "LinearSystemSim",
    "validate_time_step",
    "ElevatorSim",
    "BatterySim"
]
