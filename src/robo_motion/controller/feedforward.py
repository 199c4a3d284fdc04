"""
Feedforward models for permanent-magnet DC motor mechanisms.

Voltage Model:
    Simple motor:  V = kS sgn(v) + kV v + kA a
    Elevator:      V = kS sgn(v) + kG + kV v + kA a

    where:
    - kS: voltage to overcome static friction [V]
    - kG: voltage to hold the carriage against gravity [V]
    - kV: voltage per unit velocity [V/(m/s)]
    - kA: voltage per unit acceleration [V/(m/s²)]

Discretized Form:
    For a velocity setpoint that changes from v_k to v_{k+1} over one period T,
    the motor model dv/dt = -kV/kA v + 1/kA u is discretized with zero-order
    hold:

        A_d = exp(-kV/kA T)
        B_d = (A_d - 1) / A * B = (1 - A_d) / kV
        u   = kS sgn(v_k) [+ kG] + (v_{k+1} - A_d v_k) / B_d

    With kA = 0 the model has no dynamics and u = kS sgn(v_{k+1}) [+ kG] + kV v_{k+1}.
"""

import math

from ..exceptions import InvalidParameterError
from ..math_util import sgn


class SimpleMotorFeedforward:
    """
    Feedforward for a motor driving an unloaded or horizontally loaded mechanism.

    Attributes:
        ks: Static gain [V]
        kv: Velocity gain [V/(m/s)]
        ka: Acceleration gain [V/(m/s²)]
        period: Control period used by the discretized form [s]
    """

    def __init__(self, ks: float, kv: float, ka: float = 0.0, period: float = 0.02):
        if kv < 0:
            raise InvalidParameterError(f"kV must be non-negative, got {kv}")
        if ka < 0:
            raise InvalidParameterError(f"kA must be non-negative, got {ka}")
        if not period > 0:
            raise InvalidParameterError(f"Period must be positive, got {period}")

        self.ks = ks
        self.kv = kv
        self.ka = ka
        self.period = period

    def _gravity_term(self) -> float:
        return 0.0

    def calculate(self, velocity: float, acceleration: float = 0.0) -> float:
        """
        Voltage for the desired velocity and acceleration.

        Args:
            velocity: Desired velocity [m/s]
            acceleration: Desired acceleration [m/s²], zero when omitted

        Returns:
            Feedforward voltage [V]
        """
        return (self.ks * sgn(velocity) + self._gravity_term()
                + self.kv * velocity + self.ka * acceleration)

    def calculate_with_velocities(self, current_velocity: float, next_velocity: float) -> float:
        """
        Voltage that moves the mechanism from ``current_velocity`` to
        ``next_velocity`` in exactly one period.
        """
        if self.ka == 0:
            return self.ks * sgn(next_velocity) + self._gravity_term() + self.kv * next_velocity

        if self.kv == 0:
            a_d = 1.0
            b_d = self.period / self.ka
        else:
            a = -self.kv / self.ka
            b = 1.0 / self.ka
            a_d = math.exp(a * self.period)
            b_d = 1.0 / a * (a_d - 1.0) * b

        return (self.ks * sgn(current_velocity) + self._gravity_term()
                + (next_velocity - a_d * current_velocity) / b_d)

    def max_achievable_velocity(self, max_voltage: float, acceleration: float) -> float:
        """Largest velocity reachable while also accelerating at ``acceleration``."""
        if self.kv == 0:
            return math.inf
        return (max_voltage - self.ks - self._gravity_term() - acceleration * self.ka) / self.kv

    def min_achievable_velocity(self, max_voltage: float, acceleration: float) -> float:
        """Most negative velocity reachable while accelerating at ``acceleration``."""
        if self.kv == 0:
            return -math.inf
        return (-max_voltage + self.ks - self._gravity_term() - acceleration * self.ka) / self.kv

    def max_achievable_acceleration(self, max_voltage: float, velocity: float) -> float:
        """Largest acceleration available at ``velocity`` with ``max_voltage``."""
        if self.ka == 0:
            return math.inf if max_voltage >= 0 else -math.inf
        return (max_voltage - self.ks * sgn(velocity) - self._gravity_term()
                - velocity * self.kv) / self.ka

    def min_achievable_acceleration(self, max_voltage: float, velocity: float) -> float:
        """Most negative acceleration available at ``velocity``."""
        return self.max_achievable_acceleration(-max_voltage, velocity)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ks={self.ks}, kv={self.kv}, ka={self.ka})"


class ElevatorFeedforward(SimpleMotorFeedforward):
    """
    Feedforward for a vertically moving carriage, adding a constant kG term
    that holds the load against gravity.

    Attributes:
        kg: Gravity gain [V]
    """

    def __init__(self, ks: float, kg: float, kv: float, ka: float = 0.0,
                 period: float = 0.02):
        super().__init__(ks, kv, ka, period)
        self.kg = kg

    def _gravity_term(self) -> float:
        return self.kg

    def __repr__(self) -> str:
        return (f"ElevatorFeedforward(ks={self.ks}, kg={self.kg}, "
                f"kv={self.kv}, ka={self.ka})")
