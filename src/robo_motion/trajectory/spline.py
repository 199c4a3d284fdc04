"""
Path fitting through waypoints and adaptive sampling of the fitted path.

Mathematical Framework:
    The path is a piecewise cubic curve r(s) = (x(s), y(s)) with one unit of
    the parameter s per segment between consecutive knots.

    Interior waypoints (translations only) use a clamped cubic spline: C2
    continuous at every interior knot, with the first derivative at both ends
    fixed to the start and end headings:

        r'(0) = λ_0 (cos θ_start, sin θ_start)
        r'(n) = λ_n (cos θ_end, sin θ_end)

    where λ = 1.2 times the length of the adjacent chord. Full poses at every
    knot use a cubic Hermite spline with the same tangent scaling instead.

    Heading and curvature follow from the derivatives:

        θ = atan2(y', x')
        κ = (x' y'' - x'' y') / (x'² + y'²)^(3/2)

Sampling:
    Each segment is recursively bisected until the arc between neighbouring
    samples is shorter than MAX_DX, deviates sideways by less than MAX_DY and
    turns by less than MAX_DTHETA.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from scipy.interpolate import CubicHermiteSpline, CubicSpline

from ..exceptions import InvalidParameterError, TrajectoryGenerationError
from ..geometry import Pose2d, Rotation2d, Translation2d

logger = logging.getLogger(__name__)

MAX_DX = 0.127          # [m]
MAX_DY = 0.00127        # [m]
MAX_DTHETA = 0.0872     # [rad]
MAX_ITERATIONS = 5000   # per segment
TANGENT_SCALE = 1.2


@dataclass(frozen=True)
class PoseWithCurvature:
    """Path sample: pose and curvature [rad/m]."""

    pose: Pose2d
    curvature: float


def _tangent(rotation: Rotation2d, scale: float) -> np.ndarray:
    return np.array([rotation.cos * scale, rotation.sin * scale])


def _check_distinct(points: Sequence[Translation2d]) -> None:
    for first, second in zip(points[:-1], points[1:]):
        if first.distance(second) < 1e-9:
            raise InvalidParameterError(
                f"Consecutive waypoints coincide at ({first.x}, {first.y})")


def fit_clamped_spline(start: Pose2d, interior_waypoints: Sequence[Translation2d],
                       end: Pose2d) -> CubicSpline:
    """
    Fit a clamped cubic spline through the start, interior and end points.

    Returns:
        Vector-valued spline over s in [0, n_segments] producing (x, y)
    """
    knots = [start.translation] + list(interior_waypoints) + [end.translation]
    _check_distinct(knots)

    if interior_waypoints:
        start_scale = TANGENT_SCALE * start.translation.distance(interior_waypoints[0])
        end_scale = TANGENT_SCALE * end.translation.distance(interior_waypoints[-1])
    else:
        start_scale = end_scale = TANGENT_SCALE * start.translation.distance(end.translation)

    s = np.arange(len(knots), dtype=np.float64)
    xy = np.array([[p.x, p.y] for p in knots], dtype=np.float64)

    return CubicSpline(
        s, xy,
        bc_type=((1, _tangent(start.rotation, start_scale)),
                 (1, _tangent(end.rotation, end_scale))),
    )


def fit_hermite_spline(waypoints: Sequence[Pose2d]) -> CubicHermiteSpline:
    """
    Fit a cubic Hermite spline that passes through every pose with its heading.
    """
    if len(waypoints) < 2:
        raise InvalidParameterError("At least two poses are required to fit a path")
    _check_distinct([pose.translation for pose in waypoints])

    s = np.arange(len(waypoints), dtype=np.float64)
    xy = np.array([[pose.x, pose.y] for pose in waypoints], dtype=np.float64)

    tangents = []
    for i, pose in enumerate(waypoints):
        neighbour = waypoints[i + 1] if i + 1 < len(waypoints) else waypoints[i - 1]
        scale = TANGENT_SCALE * pose.distance_to(neighbour)
        tangents.append(_tangent(pose.rotation, scale))

    return CubicHermiteSpline(s, xy, np.array(tangents))


def _point_at(spline, s: float) -> PoseWithCurvature:
    x, y = spline(s)
    dx, dy = spline(s, 1)
    ddx, ddy = spline(s, 2)

    speed_sq = dx * dx + dy * dy
    try:
        heading = Rotation2d.from_components(dx, dy)
    except InvalidParameterError as exc:
        raise TrajectoryGenerationError(
            f"Path has a cusp at parameter {s:.4f}; heading is undefined") from exc

    curvature = (dx * ddy - ddx * dy) / (speed_sq * np.sqrt(speed_sq))
    return PoseWithCurvature(Pose2d(Translation2d(float(x), float(y)), heading), float(curvature))


def _parameterize_segment(spline, s0: float, s1: float) -> List[PoseWithCurvature]:
    points = [_point_at(spline, s0)]
    stack = [(s0, s1)]
    iterations = 0

    while stack:
        t0, t1 = stack.pop()
        start = _point_at(spline, t0)
        end = _point_at(spline, t1)

        twist = start.pose.log(end.pose)
        if abs(twist.dy) > MAX_DY or abs(twist.dx) > MAX_DX or abs(twist.dtheta) > MAX_DTHETA:
            mid = (t0 + t1) / 2.0
            stack.append((mid, t1))
            stack.append((t0, mid))
        else:
            points.append(end)

        iterations += 1
        if iterations >= MAX_ITERATIONS:
            raise TrajectoryGenerationError(
                "Path could not be sampled; waypoints may be too close together "
                "or headings may be unreachable")

    return points


def sample_path(spline) -> List[PoseWithCurvature]:
    """
    Sample every segment of ``spline`` adaptively.

    The first point of each segment after the first duplicates the last point
    of the previous segment and is dropped.
    """
    n_segments = len(spline.x) - 1
    points: List[PoseWithCurvature] = []

    for i in range(n_segments):
        segment_points = _parameterize_segment(spline, float(i), float(i + 1))
        if i > 0:
            segment_points = segment_points[1:]
        points.extend(segment_points)

    logger.debug(f"Sampled {n_segments} path segment(s) into {len(points)} points")
    return points
