"""
Discrete-time PID controller.

Control Law:
    e[k]  = r[k] - y[k]                       (position error)
    ė[k]  = (e[k] - e[k-1]) / T               (velocity error)
    ∫e[k] = clamp(∫e[k-1] + e[k] T, i_min / ki, i_max / ki)
    u[k]  = kp e[k] + ki ∫e[k] + kd ė[k]

    where T is the fixed control period.

Integration:
    Rectangular (forward Euler) over the configured period. The integral is
    only accumulated while ki != 0, is clamped to the integrator range, and is
    zeroed whenever |e| exceeds the integration zone.

Derivative Policy:
    The derivative acts on the change in *error*, not in measurement. A step
    in the setpoint therefore produces a one-period derivative kick of
    kd * Δr / T. The previous error starts at zero, so the very first call
    also sees the full error as a change. ``reset()`` restores this state.

Timing:
    The controller assumes ``calculate`` is called once per ``period``. It
    does not measure wall-clock time; calling at a different rate changes the
    effective ki and kd.
"""

import math
from typing import Optional

from ..exceptions import InvalidParameterError
from ..math_util import clamp, input_modulus


class PIDController:
    """
    PID controller with tolerances, continuous input and anti-windup.

    Attributes:
        kp: Proportional gain
        ki: Integral gain
        kd: Derivative gain
        period: Control period [s]
    """

    def __init__(self, kp: float, ki: float, kd: float, period: float = 0.02):
        """
        Args:
            kp: Proportional gain, >= 0
            ki: Integral gain, >= 0
            kd: Derivative gain, >= 0
            period: Control period [s], > 0

        Raises:
            InvalidParameterError: On negative gains or non-positive period
        """
        self._validate_gains(kp, ki, kd)
        if not period > 0:
            raise InvalidParameterError(f"Controller period must be positive, got {period}")

        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.period = period

        self._izone = math.inf
        self._maximum_integral = 1.0
        self._minimum_integral = -1.0

        self._maximum_input = 0.0
        self._minimum_input = 0.0
        self._continuous = False

        self._position_error = 0.0
        self._velocity_error = 0.0
        self._prev_error = 0.0
        self._total_error = 0.0

        self._position_tolerance = 0.05
        self._velocity_tolerance = math.inf

        self._setpoint = 0.0
        self._measurement = 0.0
        self._have_setpoint = False
        self._have_measurement = False

    @staticmethod
    def _validate_gains(kp: float, ki: float, kd: float) -> None:
        if kp < 0 or ki < 0 or kd < 0:
            raise InvalidParameterError(
                f"PID gains must be non-negative, got kp={kp}, ki={ki}, kd={kd}")

    def set_pid(self, kp: float, ki: float, kd: float) -> None:
        """Replace all three gains at once."""
        self._validate_gains(kp, ki, kd)
        self.kp = kp
        self.ki = ki
        self.kd = kd

    def set_izone(self, izone: float) -> None:
        """
        Only integrate while |error| is inside the zone.

        Outside the zone the accumulated integral is cleared.
        """
        if izone < 0:
            raise InvalidParameterError(f"IZone must be non-negative, got {izone}")
        self._izone = izone

    def set_integrator_range(self, minimum_integral: float, maximum_integral: float) -> None:
        """Limit ki * integral to [minimum_integral, maximum_integral]."""
        if minimum_integral > maximum_integral:
            raise InvalidParameterError("Integrator minimum must not exceed maximum")
        self._minimum_integral = minimum_integral
        self._maximum_integral = maximum_integral

    def set_tolerance(self, position_tolerance: float,
                      velocity_tolerance: float = math.inf) -> None:
        """Tolerances used by ``at_setpoint``."""
        self._position_tolerance = position_tolerance
        self._velocity_tolerance = velocity_tolerance

    def enable_continuous_input(self, minimum_input: float, maximum_input: float) -> None:
        """
        Treat the input range as a circle, e.g. -pi..pi for a heading.

        The error is wrapped to the shortest way around.
        """
        if not minimum_input < maximum_input:
            raise InvalidParameterError(
                f"Continuous input minimum ({minimum_input}) must be below maximum ({maximum_input})")
        self._continuous = True
        self._minimum_input = minimum_input
        self._maximum_input = maximum_input

    def disable_continuous_input(self) -> None:
        self._continuous = False

    @property
    def is_continuous_input_enabled(self) -> bool:
        return self._continuous

    @property
    def setpoint(self) -> float:
        return self._setpoint

    def set_setpoint(self, setpoint: float) -> None:
        self._setpoint = setpoint
        self._have_setpoint = True

        if self._continuous:
            error_bound = (self._maximum_input - self._minimum_input) / 2.0
            self._position_error = input_modulus(
                self._setpoint - self._measurement, -error_bound, error_bound)
        else:
            self._position_error = self._setpoint - self._measurement

        self._velocity_error = (self._position_error - self._prev_error) / self.period

    @property
    def position_error(self) -> float:
        return self._position_error

    @property
    def velocity_error(self) -> float:
        return self._velocity_error

    @property
    def accumulated_error(self) -> float:
        return self._total_error

    def at_setpoint(self) -> bool:
        """
        True once both a setpoint and a measurement have been seen and the
        position and velocity errors are inside their tolerances.
        """
        return (self._have_measurement and self._have_setpoint
                and abs(self._position_error) < self._position_tolerance
                and abs(self._velocity_error) < self._velocity_tolerance)

    def calculate(self, measurement: float, setpoint: Optional[float] = None) -> float:
        """
        Compute the next controller output.

        Args:
            measurement: Current process variable
            setpoint: New setpoint; keeps the previous one when omitted

        Returns:
            Controller output kp e + ki ∫e + kd ė
        """
        if setpoint is not None:
            self._setpoint = setpoint
            self._have_setpoint = True

        self._measurement = measurement
        self._prev_error = self._position_error
        self._have_measurement = True

        if self._continuous:
            error_bound = (self._maximum_input - self._minimum_input) / 2.0
            self._position_error = input_modulus(
                self._setpoint - self._measurement, -error_bound, error_bound)
        else:
            self._position_error = self._setpoint - self._measurement

        self._velocity_error = (self._position_error - self._prev_error) / self.period

        if abs(self._position_error) > self._izone:
            self._total_error = 0.0
        elif self.ki != 0:
            self._total_error = clamp(
                self._total_error + self._position_error * self.period,
                self._minimum_integral / self.ki,
                self._maximum_integral / self.ki,
            )

        return (self.kp * self._position_error
                + self.ki * self._total_error
                + self.kd * self._velocity_error)

    def reset(self) -> None:
        """Clear the integral, previous error and measurement history."""
        self._position_error = 0.0
        self._prev_error = 0.0
        self._total_error = 0.0
        self._velocity_error = 0.0
        self._have_measurement = False

    def __repr__(self) -> str:
        return (f"PIDController(kp={self.kp}, ki={self.ki}, kd={self.kd}, "
                f"period={self.period}s)")
