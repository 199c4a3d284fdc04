"""
Discrete-step simulation of a linear state-space plant.

Simulation Model:
    Each update advances the state with the configured transition function,
    by default the plant's zero-order-hold step, and recomputes the output:

        x[k+1] = f(x[k], u[k], dt)
        y[k+1] = C x[k+1] + D u[k] + v,   v ~ N(0, diag(σ²))

    The measurement noise v is drawn from a seedable numpy Generator, so a
    fixed seed reproduces the same measurement sequence.

Time Step:
    Discretization is exact for any dt > 0, but control loops closed around
    the simulation degrade at large steps; dt > 0.1 s is allowed with a
    warning.
"""

import logging
import math
import warnings
from typing import Callable, Optional, Sequence, Union

import numpy as np

from ..exceptions import DimensionMismatchError, InvalidParameterError
from ..system.linear_system import LinearSystem, desaturate_input_vector, make_white_noise_vector

logger = logging.getLogger(__name__)

StateTransition = Callable[[np.ndarray, np.ndarray, float], np.ndarray]

MAX_RECOMMENDED_DT = 0.1


def validate_time_step(dt: float) -> None:
    """
    Reject non-positive or non-finite steps and warn about large ones.

    Raises:
        InvalidParameterError: If dt <= 0 or dt is not finite
    """
    if not math.isfinite(dt) or dt <= 0:
        raise InvalidParameterError(f"Time step must be positive and finite, got {dt}")
    if dt > MAX_RECOMMENDED_DT:
        warnings.warn(f"Large time step {dt:.3f}s may degrade control loop accuracy",
                      UserWarning)


def _as_vector(name: str, value, size: int) -> np.ndarray:
    vector = np.asarray(value, dtype=np.float64).ravel()
    if vector.shape != (size,):
        raise DimensionMismatchError(f"{name} must have {size} elements, got {vector.size}")
    return vector


class LinearSystemSim:
    """
    Simulates a LinearSystem with held inputs and noisy outputs.

    Attributes:
        system: The simulated plant
    """

    def __init__(self, system: LinearSystem,
                 measurement_std_devs: Optional[Sequence[float]] = None,
                 state_transition: Optional[StateTransition] = None,
                 seed: Optional[int] = None):
        """
        Args:
            system: Plant to simulate
            measurement_std_devs: Noise standard deviation per output;
                noiseless when omitted
            state_transition: Callable (x, u, dt) -> next x; the plant's
                ZOH step when omitted
            seed: Seed for the measurement noise generator

        Raises:
            DimensionMismatchError: If the noise vector does not match the outputs
        """
        self.system = system

        self._x = np.zeros(system.num_states)
        self._u = np.zeros(system.num_inputs)
        self._y = np.zeros(system.num_outputs)

        if measurement_std_devs is None:
            self._measurement_std_devs = np.zeros(system.num_outputs)
        else:
            self._measurement_std_devs = _as_vector(
                "measurement_std_devs", measurement_std_devs, system.num_outputs)
            if np.any(self._measurement_std_devs < 0):
                raise InvalidParameterError("Measurement standard deviations must be non-negative")

        self._state_transition = state_transition or system.calculate_x
        self._rng = np.random.default_rng(seed)

    def update(self, dt: float) -> None:
        """
        Advance the simulation by ``dt`` with the current input held.

        Args:
            dt: Time step [s]

        Raises:
            InvalidParameterError: If dt <= 0 or not finite
        """
        validate_time_step(dt)

        next_x = np.asarray(self._state_transition(self._x, self._u, dt), dtype=np.float64)
        self._x = _as_vector("State transition result", next_x, self.system.num_states)

        self._y = self.system.calculate_y(self._x, self._u)
        if np.any(self._measurement_std_devs > 0):
            self._y = self._y + make_white_noise_vector(self._measurement_std_devs, self._rng)

    @property
    def state(self) -> np.ndarray:
        return self._x.copy()

    def set_state(self, state) -> None:
        """Overwrite the state and recompute the noiseless output."""
        self._x = _as_vector("State", state, self.system.num_states)
        self._y = self.system.calculate_y(self._x, self._u)

    def set_input(self, u_or_index: Union[int, Sequence[float], np.ndarray],
                  value: Optional[float] = None) -> None:
        """
        Set the whole input vector, or one element of it.

        Examples:
            sim.set_input([12.0])
            sim.set_input(0, 12.0)
        """
        if value is None:
            self._u = _as_vector("Input", u_or_index, self.system.num_inputs)
        else:
            index = int(u_or_index)
            if not 0 <= index < self.system.num_inputs:
                raise DimensionMismatchError(
                    f"Input index {index} out of range for {self.system.num_inputs} inputs")
            self._u = self._u.copy()
            self._u[index] = value

    def get_input(self, index: Optional[int] = None):
        """Input vector, or one element of it."""
        if index is None:
            return self._u.copy()
        return float(self._u[index])

    def get_output(self, index: Optional[int] = None):
        """Output vector (with noise), or one element of it."""
        if index is None:
            return self._y.copy()
        return float(self._y[index])

    def clamp_input(self, max_input: float) -> None:
        """
        Scale the input vector so no element exceeds ``max_input`` in magnitude.

        All elements are scaled by the same factor, so the direction of the
        input is preserved.
        """
        clamped = desaturate_input_vector(self._u, max_input)
        if not np.array_equal(clamped, self._u):
            logger.debug(f"Input {self._u} desaturated to {clamped}")
        self._u = clamped

    def __repr__(self) -> str:
        return f"LinearSystemSim({self.system!r})"
