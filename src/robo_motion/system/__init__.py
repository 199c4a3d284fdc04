"""
State-space plants and motor models.

Components:
    - LinearSystem: Continuous or discrete LTI plant with ZOH discretization
    - DCMotor: Immutable motor model with datasheet presets
    - LinearSystemId: Plant factories from physical parameters
"""

from .linear_system import LinearSystem, desaturate_input_vector, make_white_noise_vector
from .plant import DCMotor, LinearSystemId

__all__ = [
    "LinearSystem",
    "desaturate_input_vector",
    "make_white_noise_vector",
    "DCMotor",
    "LinearSystemId"
]
