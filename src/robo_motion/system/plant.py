"""
DC motor model and plant identification from physical parameters.

Motor Model:
    A brushed (or brushless, treated as brushed) permanent-magnet DC motor
    obeys

        V = I R + ω / Kv
        τ = Kt I

    where R is the winding resistance, Kv the velocity constant and Kt the
    torque constant. From the datasheet values:

        R  = V_nominal / I_stall
        Kv = ω_free / (V_nominal - R I_free)
        Kt = τ_stall / I_stall

    Several identical motors on one gearbox behave like one motor with the
    stall torque, stall current and free current multiplied by the motor
    count; free speed is unchanged.

Elevator Plant:
    A carriage of mass m on a drum of radius r driven through gearing G:

        ẋ = [[0, 1], [0, -G² Kt / (R r² m Kv)]] x + [[0], [G Kt / (R r m)]] u
        y = [1, 0] x

    with state x = [position, velocity] and input u = voltage.
"""

import math
from dataclasses import dataclass

from ..exceptions import InvalidParameterError
from .linear_system import LinearSystem


def _rpm_to_rad_per_sec(rpm: float) -> float:
    return rpm * 2.0 * math.pi / 60.0


@dataclass(frozen=True)
class DCMotor:
    """
    Immutable DC motor (or gearbox of identical motors) model.

    Attributes:
        nominal_voltage: Voltage at which the datasheet values apply [V]
        stall_torque: Total stall torque of the gearbox [N·m]
        stall_current: Total stall current [A]
        free_current: Total free-running current [A]
        free_speed: Free-running speed [rad/s]
        num_motors: Number of motors on the gearbox
    """

    nominal_voltage: float
    stall_torque: float
    stall_current: float
    free_current: float
    free_speed: float
    num_motors: int = 1

    def __post_init__(self):
        """Validate motor parameters."""
        if self.nominal_voltage <= 0:
            raise InvalidParameterError(f"Nominal voltage must be positive, got {self.nominal_voltage}")
        if self.stall_torque <= 0:
            raise InvalidParameterError(f"Stall torque must be positive, got {self.stall_torque}")
        if self.stall_current <= 0:
            raise InvalidParameterError(f"Stall current must be positive, got {self.stall_current}")
        if self.free_current < 0:
            raise InvalidParameterError(f"Free current must be non-negative, got {self.free_current}")
        if self.free_current >= self.stall_current:
            raise InvalidParameterError("Free current must be below stall current")
        if self.free_speed <= 0:
            raise InvalidParameterError(f"Free speed must be positive, got {self.free_speed}")
        if self.num_motors < 1:
            raise InvalidParameterError(f"Motor count must be at least 1, got {self.num_motors}")

    @classmethod
    def from_datasheet(cls, nominal_voltage: float, stall_torque: float, stall_current: float,
                       free_current: float, free_speed_rpm: float,
                       num_motors: int = 1) -> "DCMotor":
        """
        Build a gearbox of ``num_motors`` identical motors from single-motor
        datasheet values (free speed in rpm).
        """
        if not isinstance(num_motors, int) or num_motors < 1:
            raise InvalidParameterError(f"Motor count must be an integer >= 1, got {num_motors}")

        return cls(
            nominal_voltage,
            stall_torque * num_motors,
            stall_current * num_motors,
            free_current * num_motors,
            _rpm_to_rad_per_sec(free_speed_rpm),
            num_motors,
        )

    @property
    def resistance(self) -> float:
        """Winding resistance [Ω]."""
        return self.nominal_voltage / self.stall_current

    @property
    def kv(self) -> float:
        """Velocity constant [rad/s per V]."""
        return self.free_speed / (self.nominal_voltage - self.resistance * self.free_current)

    @property
    def kt(self) -> float:
        """Torque constant [N·m per A]."""
        return self.stall_torque / self.stall_current

    def current(self, speed: float, input_voltage: float) -> float:
        """Current drawn at ``speed`` [rad/s] with ``input_voltage`` applied [A]."""
        return -speed / (self.kv * self.resistance) + input_voltage / self.resistance

    def torque(self, current: float) -> float:
        """Torque produced by ``current`` [N·m]."""
        return self.kt * current

    def voltage(self, torque: float, speed: float) -> float:
        """Voltage needed to produce ``torque`` at ``speed`` [V]."""
        return torque / self.kt * self.resistance + speed / self.kv

    def speed(self, torque: float, input_voltage: float) -> float:
        """Speed reached while producing ``torque`` with ``input_voltage`` [rad/s]."""
        return input_voltage * self.kv - torque * self.resistance * self.kv / self.kt

    def with_reduction(self, gearbox_reduction: float) -> "DCMotor":
        """
        Motor as seen through a reduction (output slower and stronger).

        Args:
            gearbox_reduction: Input speed divided by output speed, > 0
        """
        if not gearbox_reduction > 0:
            raise InvalidParameterError(
                f"Gearbox reduction must be positive, got {gearbox_reduction}")
        return DCMotor(
            self.nominal_voltage,
            self.stall_torque * gearbox_reduction,
            self.stall_current,
            self.free_current,
            self.free_speed / gearbox_reduction,
            self.num_motors,
        )

    @classmethod
    def cim(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 2.42, 133.0, 2.7, 5310.0, num_motors)

    @classmethod
    def mini_cim(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 1.41, 89.0, 3.0, 5840.0, num_motors)

    @classmethod
    def bag(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 0.43, 53.0, 1.8, 13180.0, num_motors)

    @classmethod
    def vex_775_pro(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 0.71, 134.0, 0.7, 18730.0, num_motors)

    @classmethod
    def neo(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 2.6, 105.0, 1.8, 5676.0, num_motors)

    @classmethod
    def neo_550(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 0.97, 100.0, 1.4, 11000.0, num_motors)

    @classmethod
    def falcon_500(cls, num_motors: int = 1) -> "DCMotor":
        return cls.from_datasheet(12.0, 4.69, 257.0, 1.5, 6380.0, num_motors)


class LinearSystemId:
    """Factories for common mechanism plants."""

    @staticmethod
    def elevator_system(motor: DCMotor, mass: float, radius: float,
                        gearing: float) -> LinearSystem:
        """
        Elevator plant with states [position, velocity], voltage input and
        position output.

        Args:
            motor: Motor or gearbox driving the drum
            mass: Carriage mass [kg]
            radius: Drum radius [m]
            gearing: Reduction from motor to drum (> 1 is a reduction)

        Raises:
            InvalidParameterError: If mass, radius or gearing is not positive
        """
        if not mass > 0:
            raise InvalidParameterError(f"Carriage mass must be positive, got {mass}")
        if not radius > 0:
            raise InvalidParameterError(f"Drum radius must be positive, got {radius}")
        if not gearing > 0:
            raise InvalidParameterError(f"Gearing must be positive, got {gearing}")

        R = motor.resistance
        return LinearSystem(
            [[0.0, 1.0],
             [0.0, -gearing ** 2 * motor.kt / (R * radius ** 2 * mass * motor.kv)]],
            [[0.0],
             [gearing * motor.kt / (R * radius * mass)]],
            [[1.0, 0.0]],
            [[0.0]],
        )

    @staticmethod
    def flywheel_system(motor: DCMotor, moment_of_inertia: float,
                        gearing: float) -> LinearSystem:
        """
        Flywheel plant with state [angular velocity], voltage input and
        angular velocity output.

        Args:
            motor: Motor or gearbox driving the flywheel
            moment_of_inertia: Flywheel moment of inertia [kg·m²]
            gearing: Reduction from motor to flywheel
        """
        if not moment_of_inertia > 0:
            raise InvalidParameterError(
                f"Moment of inertia must be positive, got {moment_of_inertia}")
        if not gearing > 0:
            raise InvalidParameterError(f"Gearing must be positive, got {gearing}")

        R = motor.resistance
        return LinearSystem(
            [[-gearing ** 2 * motor.kt / (motor.kv * R * moment_of_inertia)]],
            [[gearing * motor.kt / (R * moment_of_inertia)]],
            [[1.0]],
            [[0.0]],
        )
