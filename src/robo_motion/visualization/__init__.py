"""
Visualization components for robo motion.

This module provides trajectory path and profile plots, tracking error
summaries and elevator response plots.
"""

from .plotter import TrajectoryPlotter, TrajectoryStatistics, plot_elevator_response

__all__ = [
    "TrajectoryPlotter",
    "TrajectoryStatistics",
    "plot_elevator_response"
]
