"""
Elevator mechanism simulation.

Physical Model:
    A carriage on a cable drum, driven by a DC gearbox:

        ẋ = A x + B u - [0, g]ᵀ    (g = 9.8 m/s² when gravity is simulated)

    Gravity is constant, so it is folded into the held input as the
    equivalent voltage u_g = -g / B[1] and the plant's exact zero-order-hold
    step is applied to u + u_g.

Hard Stops:
    After each step the position is clamped to [min_height, max_height]. At
    the lower stop any downward velocity is removed; at the upper stop any
    upward velocity is removed.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..exceptions import InvalidParameterError
from ..math_util import clamp, sgn
from ..system.plant import DCMotor, LinearSystemId
from .linear_system_sim import LinearSystemSim

logger = logging.getLogger(__name__)

GRAVITY = 9.8  # [m/s²]


class ElevatorSim:
    """
    Simulated elevator with hard stops, optional gravity and current draw.

    Attributes:
        gearbox: Motor model driving the drum
        gearing: Reduction from motor to drum
        drum_radius: Drum radius [m]
        min_height: Lower hard stop [m]
        max_height: Upper hard stop [m]
        simulate_gravity: Whether gravity acts on the carriage
    """

    def __init__(self, gearbox: DCMotor, gearing: float, carriage_mass: float,
                 drum_radius: float, min_height: float, max_height: float,
                 simulate_gravity: bool, starting_height: float,
                 measurement_std_devs: Optional[Sequence[float]] = None,
                 seed: Optional[int] = None):
        """
        Args:
            gearbox: Motor or gearbox driving the drum
            gearing: Reduction from motor to drum
            carriage_mass: Carriage mass [kg]
            drum_radius: Drum radius [m]
            min_height: Lower hard stop [m]
            max_height: Upper hard stop [m], > min_height
            simulate_gravity: Apply gravity to the carriage
            starting_height: Initial position [m], within the stops
            measurement_std_devs: Position measurement noise [m]
            seed: Seed for the measurement noise

        Raises:
            InvalidParameterError: On inconsistent heights or non-positive
                mass, radius or gearing
        """
        if not min_height < max_height:
            raise InvalidParameterError(
                f"min_height ({min_height}) must be below max_height ({max_height})")
        if not min_height <= starting_height <= max_height:
            raise InvalidParameterError(
                f"Starting height {starting_height} outside [{min_height}, {max_height}]")

        self.plant = LinearSystemId.elevator_system(gearbox, carriage_mass, drum_radius, gearing)
        self.gearbox = gearbox
        self.gearing = gearing
        self.carriage_mass = carriage_mass
        self.drum_radius = drum_radius
        self.min_height = min_height
        self.max_height = max_height
        self.simulate_gravity = simulate_gravity

        self._gravity_input = -GRAVITY / self.plant.B[1, 0]
        self._battery_voltage = 12.0

        self._sim = LinearSystemSim(self.plant, measurement_std_devs,
                                    state_transition=self._transition, seed=seed)
        self.set_state(starting_height, 0.0)

        logger.info(f"ElevatorSim initialized: {gearbox.num_motors} motor(s), "
                    f"G={gearing}, m={carriage_mass}kg, r={drum_radius}m, "
                    f"range=[{min_height}, {max_height}]m")

    def _transition(self, x: np.ndarray, u: np.ndarray, dt: float) -> np.ndarray:
        if self.simulate_gravity:
            u = u + self._gravity_input

        next_x = self.plant.calculate_x(x, u, dt)
        position, velocity = next_x

        if self.would_hit_lower_limit(position):
            logger.debug(f"Elevator hit lower limit at {self.min_height}m")
            return np.array([self.min_height, max(velocity, 0.0)])
        if self.would_hit_upper_limit(position):
            logger.debug(f"Elevator hit upper limit at {self.max_height}m")
            return np.array([self.max_height, min(velocity, 0.0)])
        return next_x

    @property
    def battery_voltage(self) -> float:
        """Supply voltage that input commands are clamped to [V]."""
        return self._battery_voltage

    @battery_voltage.setter
    def battery_voltage(self, volts: float) -> None:
        if not volts > 0:
            raise InvalidParameterError(f"Battery voltage must be positive, got {volts}")
        self._battery_voltage = volts

    def update(self, dt: float) -> None:
        """Advance the simulation by ``dt`` seconds."""
        self._sim.update(dt)

    def set_input_voltage(self, volts: float) -> None:
        """Command a motor voltage, clamped to ±battery_voltage."""
        clamped = clamp(volts, -self._battery_voltage, self._battery_voltage)
        self._sim.set_input([clamped])

    @property
    def input_voltage(self) -> float:
        return self._sim.get_input(0)

    def set_state(self, position: float, velocity: float) -> None:
        """Place the carriage; position is clamped to the stops."""
        self._sim.set_state([clamp(position, self.min_height, self.max_height), velocity])

    @property
    def position(self) -> float:
        """Measured carriage height [m], including measurement noise."""
        return self._sim.get_output(0)

    @property
    def velocity(self) -> float:
        """Carriage velocity [m/s]."""
        return float(self._sim.state[1])

    def get_current_draw(self) -> float:
        """
        Current drawn by the gearbox [A].

        The motor spins at v G / r. The draw is non-negative while the motor
        drives the carriage in either direction and negative when the carriage
        back-drives it against the applied voltage.
        """
        motor_velocity = self.velocity * self.gearing / self.drum_radius
        u = self.input_voltage
        return self.gearbox.current(motor_velocity, u) * sgn(u)

    def would_hit_lower_limit(self, height: float) -> bool:
        return height <= self.min_height

    def would_hit_upper_limit(self, height: float) -> bool:
        return height >= self.max_height

    def has_hit_lower_limit(self) -> bool:
        return self.would_hit_lower_limit(self.position)

    def has_hit_upper_limit(self) -> bool:
        return self.would_hit_upper_limit(self.position)

    def __repr__(self) -> str:
        return (f"ElevatorSim(position={self.position:.3f}m, velocity={self.velocity:.3f}m/s, "
                f"range=[{self.min_height}, {self.max_height}]m)")
