"""
Trajectory generation from waypoints.

Pipeline:
    waypoints -> spline fit -> adaptive sampling -> time parameterization

For reversed trajectories the path is fitted with both end headings flipped
by π so the spline leaves the start travelling backwards; the sampled
headings are then flipped back and the curvature negated.
"""

import logging
import math
from typing import List, Sequence

from ..geometry import Pose2d, Rotation2d, Transform2d, Translation2d
from .config import TrajectoryConfig
from .parameterizer import time_parameterize_trajectory
from .spline import PoseWithCurvature, fit_clamped_spline, fit_hermite_spline, sample_path
from .trajectory import Trajectory

logger = logging.getLogger(__name__)

_FLIP = Transform2d(Translation2d(), Rotation2d(math.pi))


class TrajectoryGenerator:
    """
    Generates time-parameterized trajectories that respect a TrajectoryConfig.
    """

    @staticmethod
    def generate_trajectory(start: Pose2d, interior_waypoints: Sequence[Translation2d],
                            end: Pose2d, config: TrajectoryConfig) -> Trajectory:
        """
        Generate a trajectory through translation-only interior waypoints.

        Args:
            start: Starting pose (position and heading)
            interior_waypoints: Positions to pass through, possibly empty
            end: Final pose
            config: Velocity/acceleration limits and constraints

        Returns:
            Trajectory beginning at ``start`` and ending at ``end``

        Raises:
            InvalidParameterError: If consecutive waypoints coincide
            TrajectoryGenerationError: If the path cannot be sampled or timed
        """
        if config.reversed:
            start = start.transform_by(_FLIP)
            end = end.transform_by(_FLIP)

        spline = fit_clamped_spline(start, list(interior_waypoints), end)
        points = sample_path(spline)

        return TrajectoryGenerator._parameterize(points, config)

    @staticmethod
    def generate_trajectory_from_poses(waypoints: Sequence[Pose2d],
                                       config: TrajectoryConfig) -> Trajectory:
        """
        Generate a trajectory that passes through every pose with its heading.

        Args:
            waypoints: At least two poses
            config: Velocity/acceleration limits and constraints
        """
        if config.reversed:
            waypoints = [pose.transform_by(_FLIP) for pose in waypoints]

        spline = fit_hermite_spline(list(waypoints))
        points = sample_path(spline)

        return TrajectoryGenerator._parameterize(points, config)

    @staticmethod
    def _parameterize(points: List[PoseWithCurvature], config: TrajectoryConfig) -> Trajectory:
        if config.reversed:
            points = [PoseWithCurvature(point.pose.transform_by(_FLIP), -point.curvature)
                      for point in points]

        trajectory = time_parameterize_trajectory(
            points,
            config.constraints,
            config.start_velocity,
            config.end_velocity,
            config.max_velocity,
            config.max_acceleration,
            config.reversed,
        )

        logger.debug(f"Generated trajectory: {len(trajectory)} states, "
                     f"total time {trajectory.total_time:.3f}s")
        return trajectory
