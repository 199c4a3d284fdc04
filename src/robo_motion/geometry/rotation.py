"""
Planar rotation represented as a normalized (cosine, sine) pair.

Mathematical Model:
    A rotation by theta is the point (cos theta, sin theta) on the unit circle.
    Composition multiplies the complex numbers:

        (c1 + i s1)(c2 + i s2) = (c1 c2 - s1 s2) + i (c1 s2 + s1 c2)

    which is exactly angle addition but never accumulates a 2*pi offset.

Units:
    Radians throughout. Degrees only cross the boundary through
    ``Rotation2d.from_degrees`` and the ``degrees`` property.
"""

import math

from ..exceptions import InvalidParameterError
from ..math_util import angle_modulus


class Rotation2d:
    """
    Immutable rotation in the plane.

    Attributes:
        radians: Angle in (-pi, pi]
        cos: Cosine of the angle
        sin: Sine of the angle
    """

    __slots__ = ("_value", "_cos", "_sin")

    def __init__(self, value: float = 0.0):
        """
        Construct a rotation from an angle.

        Args:
            value: Angle in radians, any magnitude
        """
        self._cos = math.cos(value)
        self._sin = math.sin(value)
        self._value = angle_modulus(value)

    @classmethod
    def from_components(cls, x: float, y: float) -> "Rotation2d":
        """
        Construct a rotation pointing along the vector (x, y).

        Raises:
            InvalidParameterError: If (x, y) is the zero vector
        """
        magnitude = math.hypot(x, y)
        if magnitude <= 1e-6:
            raise InvalidParameterError(
                f"Cannot build a rotation from a zero-length vector ({x}, {y})")
        return cls._from_trig(x / magnitude, y / magnitude)

    @classmethod
    def from_degrees(cls, degrees: float) -> "Rotation2d":
        """Construct a rotation from an angle in degrees."""
        return cls(math.radians(degrees))

    @classmethod
    def _from_trig(cls, cos: float, sin: float) -> "Rotation2d":
        rotation = cls.__new__(cls)
        rotation._cos = cos
        rotation._sin = sin
        rotation._value = angle_modulus(math.atan2(sin, cos))
        return rotation

    @property
    def radians(self) -> float:
        return self._value

    @property
    def degrees(self) -> float:
        return math.degrees(self._value)

    @property
    def cos(self) -> float:
        return self._cos

    @property
    def sin(self) -> float:
        return self._sin

    @property
    def tan(self) -> float:
        return self._sin / self._cos

    def rotate_by(self, other: "Rotation2d") -> "Rotation2d":
        """
        Add ``other`` to this rotation.

        Returns:
            New rotation equal to self + other
        """
        return Rotation2d._from_trig(
            self._cos * other._cos - self._sin * other._sin,
            self._cos * other._sin + self._sin * other._cos,
        )

    def __add__(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(other)

    def __sub__(self, other: "Rotation2d") -> "Rotation2d":
        return self.rotate_by(-other)

    def __neg__(self) -> "Rotation2d":
        return Rotation2d._from_trig(self._cos, -self._sin)

    def __mul__(self, scalar: float) -> "Rotation2d":
        return Rotation2d(self._value * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Rotation2d":
        return self * (1.0 / scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rotation2d):
            return NotImplemented
        return math.hypot(self._cos - other._cos, self._sin - other._sin) < 1e-9

    __hash__ = None

    def __repr__(self) -> str:
        return f"Rotation2d(radians={self._value:.6f})"
