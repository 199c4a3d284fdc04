"""
Time parameterization of a sampled path.

Algorithm:
    1. Forward pass: walking from the start, each point's velocity is bounded
       by the global maximum, by every constraint's max_velocity, and by what
       is reachable from the previous point under its acceleration bound:

           v_i = min(v_max, sqrt(v_{i-1}² + 2 a_max,{i-1} Δs_i))

       Acceleration bounds may depend on velocity, so each point is iterated
       until the implied acceleration respects the bound.

    2. Backward pass: walking from the end with the end velocity, each point's
       velocity is lowered to what can still decelerate to its successor:

           v_i = min(v_i, sqrt(v_{i+1}² - 2 a_min,{i+1} Δs_{i+1}))

       The resulting velocity at every point is therefore the minimum of the
       two passes.

    3. Integration: between consecutive points the acceleration is constant,

           a = (v_i² - v_{i-1}²) / (2 Δs)
           Δt = (v_i - v_{i-1}) / a      if a != 0
           Δt = Δs / v_{i-1}             otherwise

       A segment with zero velocity and zero acceleration would take infinite
       time and aborts generation.

Reversed paths are parameterized with positive velocities and the signs of
velocity and acceleration are flipped on output.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Sequence

from ..exceptions import TrajectoryGenerationError
from .constraint import TrajectoryConstraint
from .spline import PoseWithCurvature
from .trajectory import Trajectory, TrajectoryState

logger = logging.getLogger(__name__)

EPSILON = 1e-6


@dataclass
class _ConstrainedState:
    point: PoseWithCurvature
    distance: float = 0.0
    max_velocity: float = 0.0
    min_acceleration: float = 0.0
    max_acceleration: float = 0.0


def _enforce_acceleration_limits(reversed_: bool, constraints: Sequence[TrajectoryConstraint],
                                 state: _ConstrainedState) -> None:
    factor = -1.0 if reversed_ else 1.0

    for constraint in constraints:
        min_max = constraint.min_max_acceleration(
            state.point.pose, state.point.curvature, state.max_velocity * factor)

        if min_max.min_acceleration > min_max.max_acceleration:
            raise TrajectoryGenerationError(
                f"{type(constraint).__name__} returned a minimum acceleration "
                f"greater than its maximum acceleration")

        if reversed_:
            state.min_acceleration = max(state.min_acceleration, -min_max.max_acceleration)
            state.max_acceleration = min(state.max_acceleration, -min_max.min_acceleration)
        else:
            state.min_acceleration = max(state.min_acceleration, min_max.min_acceleration)
            state.max_acceleration = min(state.max_acceleration, min_max.max_acceleration)


def _forward_pass(points: Sequence[PoseWithCurvature],
                  constraints: Sequence[TrajectoryConstraint],
                  start_velocity: float, max_velocity: float, max_acceleration: float,
                  reversed_: bool) -> List[_ConstrainedState]:
    constrained_states: List[_ConstrainedState] = []
    predecessor = _ConstrainedState(points[0], 0.0, start_velocity,
                                    -max_acceleration, max_acceleration)

    for point in points:
        state = _ConstrainedState(point)
        ds = point.pose.distance_to(predecessor.point.pose)
        state.distance = predecessor.distance + ds

        while True:
            reachable = predecessor.max_velocity ** 2 + 2.0 * predecessor.max_acceleration * ds
            state.max_velocity = min(max_velocity, math.sqrt(max(reachable, 0.0)))
            state.min_acceleration = -max_acceleration
            state.max_acceleration = max_acceleration

            for constraint in constraints:
                state.max_velocity = min(
                    state.max_velocity,
                    constraint.max_velocity(point.pose, point.curvature, state.max_velocity))

            _enforce_acceleration_limits(reversed_, constraints, state)

            if ds < EPSILON:
                break

            actual_acceleration = ((state.max_velocity ** 2 - predecessor.max_velocity ** 2)
                                   / (2.0 * ds))

            if state.max_acceleration < actual_acceleration - 1e-6:
                # Retry with the predecessor limited to what this state allows
                predecessor.max_acceleration = state.max_acceleration
            else:
                if actual_acceleration > predecessor.min_acceleration:
                    predecessor.max_acceleration = actual_acceleration
                # Deceleration violations are repaired in the backward pass
                break

        constrained_states.append(state)
        predecessor = replace(state)

    return constrained_states


def _backward_pass(constrained_states: List[_ConstrainedState],
                   constraints: Sequence[TrajectoryConstraint],
                   end_velocity: float, max_acceleration: float, reversed_: bool) -> None:
    last = constrained_states[-1]
    successor = _ConstrainedState(last.point, last.distance, end_velocity,
                                  -max_acceleration, max_acceleration)

    for state in reversed(constrained_states):
        ds = state.distance - successor.distance  # <= 0

        while True:
            reachable = successor.max_velocity ** 2 + 2.0 * successor.min_acceleration * ds
            new_max_velocity = math.sqrt(max(reachable, 0.0))

            if new_max_velocity >= state.max_velocity:
                break

            state.max_velocity = new_max_velocity
            _enforce_acceleration_limits(reversed_, constraints, state)

            if ds > -EPSILON:
                break

            actual_acceleration = ((state.max_velocity ** 2 - successor.max_velocity ** 2)
                                   / (2.0 * ds))

            if state.min_acceleration > actual_acceleration + 1e-6:
                successor.min_acceleration = state.min_acceleration
            else:
                successor.min_acceleration = actual_acceleration
                break

        successor = replace(state)


def time_parameterize_trajectory(points: Sequence[PoseWithCurvature],
                                 constraints: Sequence[TrajectoryConstraint],
                                 start_velocity: float, end_velocity: float,
                                 max_velocity: float, max_acceleration: float,
                                 reversed_: bool) -> Trajectory:
    """
    Assign velocities, accelerations and timestamps to sampled path points.

    Args:
        points: Path samples in travel order
        constraints: Additional user constraints
        start_velocity: Velocity at the first point [m/s]
        end_velocity: Velocity at the last point [m/s]
        max_velocity: Global velocity limit [m/s]
        max_acceleration: Global acceleration limit [m/s²]
        reversed_: Whether the robot drives the path backwards

    Returns:
        Trajectory with one state per path point

    Raises:
        TrajectoryGenerationError: If no finite-time profile exists
    """
    if not points:
        raise TrajectoryGenerationError("Cannot parameterize an empty path")

    constrained_states = _forward_pass(points, constraints, start_velocity,
                                       max_velocity, max_acceleration, reversed_)
    _backward_pass(constrained_states, constraints, end_velocity, max_acceleration, reversed_)

    states: List[TrajectoryState] = []
    time = 0.0
    distance = 0.0
    velocity = 0.0
    sign = -1.0 if reversed_ else 1.0

    for i, state in enumerate(constrained_states):
        ds = state.distance - distance
        accel = 0.0
        dt = 0.0

        if i > 0:
            if ds <= 0:
                raise TrajectoryGenerationError(
                    f"Path points {i - 1} and {i} coincide; cannot integrate time")

            accel = (state.max_velocity ** 2 - velocity ** 2) / (2.0 * ds)
            previous = states[i - 1]
            states[i - 1] = replace(previous, acceleration=accel * sign)

            if abs(accel) > 1e-6:
                dt = (state.max_velocity - velocity) / accel
            elif abs(velocity) > 1e-6:
                dt = ds / velocity
            else:
                raise TrajectoryGenerationError(
                    f"Segment {i} has zero velocity and zero acceleration; "
                    f"the trajectory would never finish")

        velocity = state.max_velocity
        distance = state.distance
        time += dt

        states.append(TrajectoryState(
            time,
            velocity * sign,
            accel * sign,
            state.point.pose,
            state.point.curvature,
        ))

    return Trajectory(states)
