"""
Rigid-body placement in the plane and the deltas between placements.

Mathematical Framework:
    A pose (t, R) maps robot-frame points into the field frame:

        p_field = R p_robot + t

    Composing a pose with a transform (dt, dR) expressed in the pose's own
    frame gives (t + R dt, R dR). This operation is associative and a
    transform composed with its inverse yields the identity.

    Twists describe motion along a constant-curvature arc. ``Pose2d.exp``
    integrates a twist exactly and ``Pose2d.log`` recovers the twist that
    moves one pose onto another (the SE(2) exponential and logarithm maps).

Coordinate Frames:
    - Field frame: fixed, x-forward from the origin, y-left, counter-clockwise
      positive rotation
    - Robot frame: x-forward, y-left
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Union

from .rotation import Rotation2d
from .translation import Translation2d


@dataclass(frozen=True)
class Twist2d:
    """
    Change in pose along an arc, expressed in the starting pose's frame.

    Attributes:
        dx: Forward distance [m]
        dy: Sideways distance [m]
        dtheta: Heading change [rad]
    """

    dx: float = 0.0
    dy: float = 0.0
    dtheta: float = 0.0

    def __mul__(self, scalar: float) -> "Twist2d":
        return Twist2d(self.dx * scalar, self.dy * scalar, self.dtheta * scalar)

    __rmul__ = __mul__


@dataclass(frozen=True, eq=False)
class Transform2d:
    """
    Relative pose delta: the translation and rotation needed to move from one
    Pose2d to another, expressed in the starting pose's frame.
    """

    translation: Translation2d = field(default_factory=Translation2d)
    rotation: Rotation2d = field(default_factory=Rotation2d)

    @classmethod
    def between(cls, initial: "Pose2d", final: "Pose2d") -> "Transform2d":
        """
        Build the transform that maps ``initial`` onto ``final``.

        Mathematical Model:
            dt = R_initial^T (t_final - t_initial)
            dR = R_final - R_initial
        """
        return cls(
            (final.translation - initial.translation).rotate_by(-initial.rotation),
            final.rotation - initial.rotation,
        )

    @property
    def x(self) -> float:
        return self.translation.x

    @property
    def y(self) -> float:
        return self.translation.y

    def inverse(self) -> "Transform2d":
        """Transform that undoes this one."""
        return Transform2d(
            (-self.translation).rotate_by(-self.rotation),
            -self.rotation,
        )

    def __add__(self, other: "Transform2d") -> "Transform2d":
        origin = Pose2d()
        return Transform2d.between(origin, origin.transform_by(self).transform_by(other))

    def __mul__(self, scalar: float) -> "Transform2d":
        return Transform2d(self.translation * scalar, self.rotation * scalar)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform2d):
            return NotImplemented
        return self.translation == other.translation and self.rotation == other.rotation

    __hash__ = None


@dataclass(frozen=True, eq=False)
class Pose2d:
    """
    Immutable position and heading in the plane.

    Attributes:
        translation: Position of the robot origin in the field frame [m]
        rotation: Heading of the robot in the field frame
    """

    translation: Translation2d = field(default_factory=Translation2d)
    rotation: Rotation2d = field(default_factory=Rotation2d)

    @classmethod
    def from_xy(cls, x: float, y: float,
                heading: Union[Rotation2d, float] = 0.0) -> "Pose2d":
        """
        Build a pose from coordinates.

        Args:
            x: Field x coordinate [m]
            y: Field y coordinate [m]
            heading: Rotation2d, or heading in radians
        """
        if not isinstance(heading, Rotation2d):
            heading = Rotation2d(heading)
        return cls(Translation2d(x, y), heading)

    @property
    def x(self) -> float:
        return self.translation.x

    @property
    def y(self) -> float:
        return self.translation.y

    def transform_by(self, other: Transform2d) -> "Pose2d":
        """
        Apply a transform expressed in this pose's frame.

        Returns:
            The resulting field-frame pose
        """
        return Pose2d(
            self.translation + other.translation.rotate_by(self.rotation),
            other.rotation + self.rotation,
        )

    def relative_to(self, other: "Pose2d") -> Transform2d:
        """
        Express this pose in the frame of ``other``.

        Returns:
            Transform2d such that other.transform_by(result) == self
        """
        return Transform2d.between(other, self)

    def distance_to(self, other: "Pose2d") -> float:
        """Euclidean distance between the two pose origins [m]."""
        return self.translation.distance(other.translation)

    def exp(self, twist: Twist2d) -> "Pose2d":
        """
        Integrate a constant-curvature twist starting from this pose.

        Mathematical Model:
            s = sin(dtheta) / dtheta,  c = (1 - cos(dtheta)) / dtheta
            dx' = dx s - dy c
            dy' = dx c + dy s

            For |dtheta| < 1e-9 the Taylor expansions s = 1 - dtheta^2/6 and
            c = dtheta/2 are used.
        """
        dx, dy, dtheta = twist.dx, twist.dy, twist.dtheta

        sin_theta = math.sin(dtheta)
        cos_theta = math.cos(dtheta)

        if abs(dtheta) < 1e-9:
            s = 1.0 - dtheta * dtheta / 6.0
            c = 0.5 * dtheta
        else:
            s = sin_theta / dtheta
            c = (1.0 - cos_theta) / dtheta

        transform = Transform2d(
            Translation2d(dx * s - dy * c, dx * c + dy * s),
            Rotation2d._from_trig(cos_theta, sin_theta),
        )
        return self.transform_by(transform)

    def log(self, end: "Pose2d") -> Twist2d:
        """
        Twist that moves this pose onto ``end`` along a single arc.

        Inverse of ``exp``: self.exp(self.log(end)) == end.
        """
        transform = end.relative_to(self)
        dtheta = transform.rotation.radians
        half_dtheta = dtheta / 2.0

        cos_minus_one = transform.rotation.cos - 1.0

        if abs(cos_minus_one) < 1e-9:
            half_theta_by_tan_of_half_dtheta = 1.0 - dtheta * dtheta / 12.0
        else:
            half_theta_by_tan_of_half_dtheta = (
                -(half_dtheta * transform.rotation.sin) / cos_minus_one)

        translation_part = transform.translation.rotate_by(
            Rotation2d.from_components(half_theta_by_tan_of_half_dtheta, -half_dtheta)
        ) * math.hypot(half_theta_by_tan_of_half_dtheta, half_dtheta)

        return Twist2d(translation_part.x, translation_part.y, dtheta)

    def interpolate(self, end: "Pose2d", t: float) -> "Pose2d":
        """
        Pose a fraction ``t`` of the way along the arc from this pose to ``end``.
        """
        if t <= 0.0:
            return self
        if t >= 1.0:
            return end
        return self.exp(self.log(end) * t)

    def to_dict(self) -> Dict[str, float]:
        """Boundary record; rotation is in radians."""
        return {"x": self.x, "y": self.y, "rotation": self.rotation.radians}

    def __add__(self, other: Transform2d) -> "Pose2d":
        return self.transform_by(other)

    def __sub__(self, other: "Pose2d") -> Transform2d:
        return self.relative_to(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose2d):
            return NotImplemented
        return self.translation == other.translation and self.rotation == other.rotation

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Pose2d(x={self.x:.4f}, y={self.y:.4f}, "
                f"rotation={self.rotation.radians:.4f} rad)")
