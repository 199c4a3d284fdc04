"""
Linear time-invariant state-space plants.

Mathematical Model:
    Continuous time:
        ẋ = A x + B u
        y = C x + D u

    Discrete time (zero-order hold over a step T):
        x[k+1] = A_d x[k] + B_d u[k]
        y[k]   = C x[k] + D u[k]

    with A_d and B_d read off the matrix exponential of the augmented system

        exp([[A, B], [0, 0]] T) = [[A_d, B_d], [0, I]]

    which is exact for inputs held constant over the step.

Dimensions:
    n states, m inputs, p outputs:
    A (n×n), B (n×m), C (p×n), D (p×m)
"""

import logging
from collections import OrderedDict
from typing import Optional, Tuple

import numpy as np
import scipy.linalg

from ..exceptions import DimensionMismatchError, InvalidParameterError

logger = logging.getLogger(__name__)

# Discretizations kept per plant, most recently used last
MAX_CACHED_DISCRETIZATIONS = 8


def _as_matrix(name: str, value) -> np.ndarray:
    matrix = np.atleast_2d(np.asarray(value, dtype=np.float64))
    if matrix.ndim != 2:
        raise DimensionMismatchError(f"{name} must be a 2-D matrix, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise InvalidParameterError(f"{name} contains non-finite entries")
    return matrix


class LinearSystem:
    """
    State-space plant with validated, fixed dimensions.

    Attributes:
        A: System matrix (n×n)
        B: Input matrix (n×m)
        C: Output matrix (p×n)
        D: Feedthrough matrix (p×m)
        discrete: True when A and B already describe one discrete step
    """

    def __init__(self, A, B, C, D, discrete: bool = False):
        """
        Args:
            A, B, C, D: State-space matrices (array-like)
            discrete: Treat A and B as the discrete-time update; they are
                then used verbatim regardless of the step size

        Raises:
            DimensionMismatchError: If the matrix shapes are inconsistent
        """
        self.A = _as_matrix("A", A)
        self.B = _as_matrix("B", B)
        self.C = _as_matrix("C", C)
        self.D = _as_matrix("D", D)
        self.discrete = discrete

        n = self.A.shape[0]
        if self.A.shape != (n, n):
            raise DimensionMismatchError(f"A must be square, got shape {self.A.shape}")
        if self.B.shape[0] != n:
            raise DimensionMismatchError(
                f"B must have {n} rows to match A, got shape {self.B.shape}")
        if self.C.shape[1] != n:
            raise DimensionMismatchError(
                f"C must have {n} columns to match A, got shape {self.C.shape}")
        m = self.B.shape[1]
        p = self.C.shape[0]
        if self.D.shape != (p, m):
            raise DimensionMismatchError(
                f"D must have shape ({p}, {m}) to match B and C, got {self.D.shape}")

        self._discretizations: "OrderedDict[float, Tuple[np.ndarray, np.ndarray]]" = OrderedDict()

    @property
    def num_states(self) -> int:
        return self.A.shape[0]

    @property
    def num_inputs(self) -> int:
        return self.B.shape[1]

    @property
    def num_outputs(self) -> int:
        return self.C.shape[0]

    def discretize(self, dt: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Zero-order-hold discretization of (A, B) for step ``dt``.

        The last MAX_CACHED_DISCRETIZATIONS step sizes are cached, so a
        fixed loop period costs one matrix exponential.

        Args:
            dt: Step size [s]

        Returns:
            Tuple (A_d, B_d)
        """
        if self.discrete:
            return self.A, self.B

        cached = self._discretizations.get(dt)
        if cached is not None:
            self._discretizations.move_to_end(dt)
            return cached

        n = self.num_states
        m = self.num_inputs
        augmented = np.zeros((n + m, n + m))
        augmented[:n, :n] = self.A
        augmented[:n, n:] = self.B

        phi = scipy.linalg.expm(augmented * dt)
        result = (phi[:n, :n], phi[:n, n:])

        self._discretizations[dt] = result
        if len(self._discretizations) > MAX_CACHED_DISCRETIZATIONS:
            self._discretizations.popitem(last=False)
        logger.debug(f"Discretized {n}-state plant for dt={dt:.4f}s")
        return result

    def calculate_x(self, x: np.ndarray, u: np.ndarray, dt: float) -> np.ndarray:
        """Next state after holding ``u`` for ``dt``."""
        A_d, B_d = self.discretize(dt)
        return A_d @ x + B_d @ u

    def calculate_y(self, x: np.ndarray, u: np.ndarray) -> np.ndarray:
        """Output for state ``x`` and input ``u``."""
        return self.C @ x + self.D @ u

    def __repr__(self) -> str:
        kind = "discrete" if self.discrete else "continuous"
        return (f"LinearSystem(states={self.num_states}, inputs={self.num_inputs}, "
                f"outputs={self.num_outputs}, {kind})")


def desaturate_input_vector(u: np.ndarray, max_magnitude: float) -> np.ndarray:
    """
    Scale ``u`` so no element exceeds ``max_magnitude`` in absolute value.

    The whole vector is scaled by one factor, so its direction is preserved.

    Args:
        u: Input vector
        max_magnitude: Largest allowed absolute element value, > 0

    Returns:
        Scaled copy of ``u``
    """
    if not max_magnitude > 0:
        raise InvalidParameterError(f"Max input magnitude must be positive, got {max_magnitude}")

    u = np.asarray(u, dtype=np.float64)
    largest = np.max(np.abs(u)) if u.size else 0.0
    if largest > max_magnitude:
        return u * (max_magnitude / largest)
    return u.copy()


def make_white_noise_vector(std_devs, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Zero-mean Gaussian vector with one standard deviation per element.

    Args:
        std_devs: Standard deviation for each element, >= 0
        rng: Random generator; a fresh unseeded one when omitted
    """
    std_devs = np.asarray(std_devs, dtype=np.float64).ravel()
    if np.any(std_devs < 0):
        raise InvalidParameterError("Noise standard deviations must be non-negative")
    if rng is None:
        rng = np.random.default_rng()
    return rng.normal(0.0, 1.0, size=std_devs.shape) * std_devs
