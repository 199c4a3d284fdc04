"""
Velocity records exchanged between kinematics, controllers and callers.
"""

from dataclasses import dataclass
from typing import Dict

from ..geometry import Rotation2d, Translation2d


@dataclass(frozen=True)
class ChassisSpeeds:
    """
    Robot-frame velocity of the chassis center.

    Attributes:
        vx: Forward velocity [m/s]
        vy: Sideways velocity, positive left [m/s]
        omega: Angular velocity, counter-clockwise positive [rad/s]
    """

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0

    @classmethod
    def from_field_relative_speeds(cls, vx: float, vy: float, omega: float,
                                   robot_angle: Rotation2d) -> "ChassisSpeeds":
        """
        Convert field-frame velocities into the robot frame.

        Args:
            vx: Field-frame x velocity [m/s]
            vy: Field-frame y velocity [m/s]
            omega: Angular velocity [rad/s]
            robot_angle: Current robot heading in the field frame
        """
        rotated = Translation2d(vx, vy).rotate_by(-robot_angle)
        return cls(rotated.x, rotated.y, omega)

    def to_dict(self) -> Dict[str, float]:
        return {"vx": self.vx, "vy": self.vy, "omega": self.omega}

    def __add__(self, other: "ChassisSpeeds") -> "ChassisSpeeds":
        return ChassisSpeeds(self.vx + other.vx, self.vy + other.vy, self.omega + other.omega)

    def __sub__(self, other: "ChassisSpeeds") -> "ChassisSpeeds":
        return ChassisSpeeds(self.vx - other.vx, self.vy - other.vy, self.omega - other.omega)

    def __mul__(self, scalar: float) -> "ChassisSpeeds":
        return ChassisSpeeds(self.vx * scalar, self.vy * scalar, self.omega * scalar)


@dataclass(frozen=True)
class DifferentialDriveWheelSpeeds:
    """
    Linear velocity of each side of a differential drivetrain.

    Attributes:
        left: Left wheel velocity [m/s]
        right: Right wheel velocity [m/s]
    """

    left: float = 0.0
    right: float = 0.0

    def desaturate(self, max_speed: float) -> "DifferentialDriveWheelSpeeds":
        """
        Scale both wheels down so neither exceeds ``max_speed``.

        The ratio between the wheels is preserved, so the commanded curvature
        is unchanged.
        """
        real_max = max(abs(self.left), abs(self.right))
        if real_max > max_speed:
            return DifferentialDriveWheelSpeeds(
                self.left / real_max * max_speed,
                self.right / real_max * max_speed,
            )
        return self

    def to_dict(self) -> Dict[str, float]:
        return {"left": self.left, "right": self.right}

    def __add__(self, other: "DifferentialDriveWheelSpeeds") -> "DifferentialDriveWheelSpeeds":
        return DifferentialDriveWheelSpeeds(self.left + other.left, self.right + other.right)

    def __sub__(self, other: "DifferentialDriveWheelSpeeds") -> "DifferentialDriveWheelSpeeds":
        return DifferentialDriveWheelSpeeds(self.left - other.left, self.right - other.right)

    def __mul__(self, scalar: float) -> "DifferentialDriveWheelSpeeds":
        return DifferentialDriveWheelSpeeds(self.left * scalar, self.right * scalar)
