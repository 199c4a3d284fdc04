"""
Signal filters for conditioning sensor inputs.
"""

from .linear_filter import LinearFilter, MovingAverageFilter, SinglePoleIIRFilter

__all__ = [
    "LinearFilter",
    "MovingAverageFilter",
    "SinglePoleIIRFilter"
]
