"""
Time-parameterized trajectory and its interpolated sampling.

A Trajectory is an immutable sequence of TrajectoryState records ordered by
time. Between two recorded states the acceleration is constant, so sampling
at time t inside [t_i, t_{i+1}] uses constant-acceleration kinematics:

    v(t) = v_i + a_i (t - t_i)
    s(t) = v_i (t - t_i) + a_i (t - t_i)² / 2

and places the pose the fraction s(t) / |p_{i+1} - p_i| of the way along the
arc between the two recorded poses. Curvature is interpolated linearly with
the same fraction. Outside [0, total_time] sampling clamps to the first or
last state.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

import numpy as np

from ..exceptions import InvalidParameterError, TrajectoryGenerationError
from ..geometry import Pose2d, Transform2d


@dataclass(frozen=True)
class TrajectoryState:
    """
    One sample of a trajectory.

    Attributes:
        time: Time since the start of the trajectory [s]
        velocity: Linear velocity along the path [m/s]
        acceleration: Acceleration until the next state [m/s²]
        pose: Field-relative pose
        curvature: Path curvature [rad/m]
    """

    time: float = 0.0
    velocity: float = 0.0
    acceleration: float = 0.0
    pose: Pose2d = field(default_factory=Pose2d)
    curvature: float = 0.0

    def interpolate(self, end: "TrajectoryState", i: float) -> "TrajectoryState":
        """
        State a fraction ``i`` of the way in time from this state to ``end``.
        """
        new_t = self.time + (end.time - self.time) * i
        delta_t = new_t - self.time

        if delta_t < 0:
            return end.interpolate(self, 1.0 - i)

        reversing = self.velocity < 0 or (abs(self.velocity) < 1e-9 and self.acceleration < 0)

        new_v = self.velocity + self.acceleration * delta_t

        new_s = (self.velocity * delta_t
                 + 0.5 * self.acceleration * delta_t * delta_t) * (-1.0 if reversing else 1.0)

        segment_length = self.pose.distance_to(end.pose)
        if segment_length < 1e-12:
            interpolation_frac = i
        else:
            interpolation_frac = new_s / segment_length

        return TrajectoryState(
            new_t,
            new_v,
            self.acceleration,
            self.pose.interpolate(end.pose, interpolation_frac),
            self.curvature + (end.curvature - self.curvature) * interpolation_frac,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Boundary record; pose rotation is in radians."""
        return {
            "time": self.time,
            "velocity": self.velocity,
            "acceleration": self.acceleration,
            "curvature": self.curvature,
            "pose": self.pose.to_dict(),
        }


class Trajectory:
    """
    Immutable, time-ordered sequence of trajectory states.

    Attributes:
        states: Tuple of recorded states
        total_time: Time of the last state [s]
    """

    def __init__(self, states: Sequence[TrajectoryState]):
        """
        Args:
            states: Recorded states ordered by strictly increasing time

        Raises:
            TrajectoryGenerationError: If empty or not strictly ordered by time
        """
        if len(states) == 0:
            raise TrajectoryGenerationError("Trajectory requires at least one state")

        self._states = tuple(states)
        self._times = np.array([state.time for state in self._states], dtype=np.float64)

        if not np.all(np.isfinite(self._times)):
            raise TrajectoryGenerationError("Trajectory contains non-finite timestamps")
        if np.any(np.diff(self._times) <= 0):
            raise TrajectoryGenerationError("Trajectory states are not ordered by time")

        self._total_time = float(self._times[-1])

    @property
    def states(self) -> tuple:
        return self._states

    @property
    def total_time(self) -> float:
        return self._total_time

    @property
    def initial_pose(self) -> Pose2d:
        return self._states[0].pose

    def sample(self, t: float) -> TrajectoryState:
        """
        Interpolated state at time ``t``.

        Args:
            t: Time since the start of the trajectory [s]

        Returns:
            The first state for t <= 0, the last state for t >= total_time,
            otherwise the interpolation between the two bracketing states

        Raises:
            InvalidParameterError: If t is NaN
        """
        if math.isnan(t):
            raise InvalidParameterError("Cannot sample a trajectory at time NaN")
        if t <= self._states[0].time:
            return self._states[0]
        if t >= self._total_time:
            return self._states[-1]

        # First state whose time is >= t; index 0 is excluded by the check above
        high = int(np.searchsorted(self._times, t, side="left"))
        high_state = self._states[high]
        low_state = self._states[high - 1]

        span = high_state.time - low_state.time
        if abs(span) < 1e-9:
            return high_state

        return low_state.interpolate(high_state, (t - low_state.time) / span)

    def transform_by(self, transform: Transform2d) -> "Trajectory":
        """
        Move the whole trajectory so its first pose becomes
        ``initial_pose.transform_by(transform)``; all later poses keep their
        position relative to the first.
        """
        first_pose = self._states[0].pose
        new_first_pose = first_pose.transform_by(transform)

        return Trajectory([
            TrajectoryState(
                state.time, state.velocity, state.acceleration,
                new_first_pose.transform_by(state.pose.relative_to(first_pose)),
                state.curvature,
            )
            for state in self._states
        ])

    def relative_to(self, pose: Pose2d) -> "Trajectory":
        """Express every pose in the frame of ``pose``."""
        states = []
        for state in self._states:
            delta = state.pose.relative_to(pose)
            states.append(TrajectoryState(
                state.time, state.velocity, state.acceleration,
                Pose2d(delta.translation, delta.rotation), state.curvature,
            ))
        return Trajectory(states)

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [state.to_dict() for state in self._states]

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self):
        return iter(self._states)

    def __repr__(self) -> str:
        return f"Trajectory(states={len(self._states)}, total_time={self._total_time:.3f}s)"
