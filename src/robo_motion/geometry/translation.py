"""
Planar translation (a 2-D vector from the origin, in meters).
"""

import math
from dataclasses import dataclass

from .rotation import Rotation2d


@dataclass(frozen=True, eq=False)
class Translation2d:
    """Immutable (x, y) vector in meters."""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_polar(cls, distance: float, angle: Rotation2d) -> "Translation2d":
        """Build a translation ``distance`` meters along ``angle``."""
        return cls(distance * angle.cos, distance * angle.sin)

    def norm(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def distance(self, other: "Translation2d") -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle(self) -> Rotation2d:
        """Direction of the vector. Undefined for the zero vector."""
        return Rotation2d.from_components(self.x, self.y)

    def rotate_by(self, rotation: Rotation2d) -> "Translation2d":
        """
        Rotate the vector counter-clockwise about the origin.

        Mathematical Model:
            [x']   [cos -sin] [x]
            [y'] = [sin  cos] [y]
        """
        return Translation2d(
            self.x * rotation.cos - self.y * rotation.sin,
            self.x * rotation.sin + self.y * rotation.cos,
        )

    def interpolate(self, end: "Translation2d", t: float) -> "Translation2d":
        t = max(0.0, min(t, 1.0))
        return Translation2d(self.x + (end.x - self.x) * t,
                             self.y + (end.y - self.y) * t)

    def __add__(self, other: "Translation2d") -> "Translation2d":
        return Translation2d(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Translation2d") -> "Translation2d":
        return Translation2d(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Translation2d":
        return Translation2d(-self.x, -self.y)

    def __mul__(self, scalar: float) -> "Translation2d":
        return Translation2d(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Translation2d":
        return Translation2d(self.x / scalar, self.y / scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Translation2d):
            return NotImplemented
        return abs(self.x - other.x) < 1e-9 and abs(self.y - other.y) < 1e-9

    __hash__ = None
