"""
Plotting for generated trajectories and simulated mechanisms.

Classes:
    TrajectoryPlotter: Path, velocity, acceleration and curvature profiles of
        one or more trajectories, plus tracking error against a followed path

Functions:
    plot_elevator_response: Position, velocity and current of an elevator run
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np

from ..geometry import Pose2d
from ..trajectory import Trajectory

logger = logging.getLogger(__name__)


@dataclass
class TrajectoryStatistics:
    """Summary of a time-parameterized trajectory."""
    path_length: float
    total_time: float
    max_velocity: float
    max_acceleration: float
    max_curvature: float
    num_states: int


class TrajectoryPlotter:
    """
    Collects trajectories and plots their geometry and motion profiles.

    Attributes:
        trajectories (List[Dict]): Added trajectories with label, color and statistics
        figure (matplotlib.figure.Figure): Most recent figure
    """

    def __init__(self, figure_size: Tuple[int, int] = (15, 10)):
        """
        Args:
            figure_size: Matplotlib figure size in inches (width, height)
        """
        self.trajectories: List[Dict[str, Any]] = []
        self.figure = None
        self.figure_size = figure_size

    def add_trajectory(self, trajectory: Trajectory, label: str = "Trajectory",
                       color: str = 'blue') -> TrajectoryStatistics:
        """
        Add a trajectory for plotting.

        Args:
            trajectory: Generated trajectory
            label: Legend label
            color: Matplotlib color specification

        Returns:
            Statistics computed for the trajectory

        Raises:
            ValueError: If the trajectory has fewer than 2 states
        """
        if len(trajectory) < 2:
            raise ValueError("Trajectory must contain at least 2 states")

        profile = self._profile(trajectory)
        statistics = self._compute_statistics(profile, trajectory)

        self.trajectories.append({
            'label': str(label),
            'color': color,
            'profile': profile,
            'statistics': statistics,
        })

        logger.info(f"Added trajectory '{label}' with {len(trajectory)} states, "
                    f"{statistics.total_time:.2f}s")
        return statistics

    @staticmethod
    def _profile(trajectory: Trajectory) -> Dict[str, np.ndarray]:
        states = trajectory.states
        return {
            'time': np.array([s.time for s in states]),
            'x': np.array([s.pose.x for s in states]),
            'y': np.array([s.pose.y for s in states]),
            'heading': np.array([s.pose.rotation.radians for s in states]),
            'velocity': np.array([s.velocity for s in states]),
            'acceleration': np.array([s.acceleration for s in states]),
            'curvature': np.array([s.curvature for s in states]),
        }

    @staticmethod
    def _compute_statistics(profile: Dict[str, np.ndarray],
                            trajectory: Trajectory) -> TrajectoryStatistics:
        xy = np.column_stack([profile['x'], profile['y']])
        path_length = float(np.sum(np.linalg.norm(np.diff(xy, axis=0), axis=1)))

        return TrajectoryStatistics(
            path_length=path_length,
            total_time=trajectory.total_time,
            max_velocity=float(np.max(np.abs(profile['velocity']))),
            max_acceleration=float(np.max(np.abs(profile['acceleration']))),
            max_curvature=float(np.max(np.abs(profile['curvature']))),
            num_states=len(trajectory),
        )

    def plot_all_trajectories(self, show_headings: bool = False, show: bool = True):
        """
        Plot the path and motion profiles of every added trajectory.

        Args:
            show_headings: Draw heading arrows along each path
            show: Call ``plt.show()`` after drawing

        Returns:
            The matplotlib figure, or None when nothing was added
        """
        if not self.trajectories:
            logger.warning("No trajectories to plot")
            return None

        self.figure, axes = plt.subplots(2, 2, figsize=self.figure_size)
        ax_path, ax_velocity, ax_acceleration, ax_curvature = axes.ravel()

        for traj in self.trajectories:
            profile = traj['profile']
            color = traj['color']
            label = traj['label']

            ax_path.plot(profile['x'], profile['y'], color=color, label=label, linewidth=2.5)
            ax_path.scatter(profile['x'][0], profile['y'][0], color=color, marker='o', s=80)
            ax_path.scatter(profile['x'][-1], profile['y'][-1], color=color, marker='s', s=80)

            if show_headings:
                step = max(1, len(profile['x']) // 20)
                ax_path.quiver(profile['x'][::step], profile['y'][::step],
                               np.cos(profile['heading'][::step]),
                               np.sin(profile['heading'][::step]),
                               color=color, alpha=0.6, width=0.003)

            ax_velocity.plot(profile['time'], profile['velocity'], color=color, label=label)
            ax_acceleration.step(profile['time'], profile['acceleration'], where='post',
                                 color=color, label=label)
            ax_curvature.plot(profile['time'], profile['curvature'], color=color, label=label)

        ax_path.set_xlabel('X Position (m)')
        ax_path.set_ylabel('Y Position (m)')
        ax_path.set_title('Path')
        ax_path.set_aspect('equal')

        ax_velocity.set_xlabel('Time (s)')
        ax_velocity.set_ylabel('Velocity (m/s)')
        ax_velocity.set_title('Velocity Profile')

        ax_acceleration.set_xlabel('Time (s)')
        ax_acceleration.set_ylabel('Acceleration (m/s²)')
        ax_acceleration.set_title('Acceleration Profile')

        ax_curvature.set_xlabel('Time (s)')
        ax_curvature.set_ylabel('Curvature (rad/m)')
        ax_curvature.set_title('Curvature')

        for ax in axes.ravel():
            ax.grid(True, alpha=0.3)
            ax.legend()

        self.figure.tight_layout()
        if show:
            plt.show()
        return self.figure

    @staticmethod
    def tracking_error(trajectory: Trajectory, times: Sequence[float],
                       poses: Sequence[Pose2d]) -> Dict[str, float]:
        """
        Position error of a followed path against the reference trajectory.

        Args:
            trajectory: Reference trajectory
            times: Time of each measured pose [s]
            poses: Measured robot poses

        Returns:
            Dictionary with rmse, max_error, mean_error, std_error and
            percentile_95 [m]
        """
        if len(times) != len(poses):
            raise ValueError("times and poses must have the same length")
        if len(times) == 0:
            raise ValueError("At least one measured pose is required")

        errors = np.array([trajectory.sample(t).pose.distance_to(pose)
                           for t, pose in zip(times, poses)])

        return {
            'rmse': float(np.sqrt(np.mean(errors ** 2))),
            'max_error': float(np.max(errors)),
            'mean_error': float(np.mean(errors)),
            'std_error': float(np.std(errors)),
            'percentile_95': float(np.percentile(errors, 95)),
        }


def plot_elevator_response(times: Sequence[float], positions: Sequence[float],
                           velocities: Sequence[float], currents: Sequence[float],
                           setpoints: Optional[Sequence[float]] = None,
                           figure_size: Tuple[int, int] = (10, 9), show: bool = True):
    """
    Plot position, velocity and current draw of an elevator simulation.

    Args:
        times: Sample times [s]
        positions: Carriage heights [m]
        velocities: Carriage velocities [m/s]
        currents: Gearbox current draw [A]
        setpoints: Optional height setpoints [m], drawn dashed with positions
        figure_size: Figure size in inches
        show: Call ``plt.show()`` after drawing

    Returns:
        The matplotlib figure
    """
    times = np.asarray(times, dtype=np.float64)
    series = {
        'positions': np.asarray(positions, dtype=np.float64),
        'velocities': np.asarray(velocities, dtype=np.float64),
        'currents': np.asarray(currents, dtype=np.float64),
    }
    for name, values in series.items():
        if values.shape != times.shape:
            raise ValueError(f"{name} length {values.size} does not match times length {times.size}")

    figure, (ax_position, ax_velocity, ax_current) = plt.subplots(
        3, 1, figsize=figure_size, sharex=True)

    ax_position.plot(times, series['positions'], color='tab:blue', label='Position')
    if setpoints is not None:
        ax_position.plot(times, np.asarray(setpoints, dtype=np.float64),
                         color='tab:gray', linestyle='--', label='Setpoint')
    ax_position.set_ylabel('Height (m)')
    ax_position.legend()

    ax_velocity.plot(times, series['velocities'], color='tab:orange')
    ax_velocity.set_ylabel('Velocity (m/s)')

    ax_current.plot(times, series['currents'], color='tab:red')
    ax_current.set_ylabel('Current (A)')
    ax_current.set_xlabel('Time (s)')

    for ax in (ax_position, ax_velocity, ax_current):
        ax.grid(True, alpha=0.3)

    figure.tight_layout()
    if show:
        plt.show()
    return figure
