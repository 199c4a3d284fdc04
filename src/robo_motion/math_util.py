"""
Scalar helpers shared by the geometry, controller and filter modules.

All angles are in radians. The wrapping helpers are pure functions of their
arguments so that every caller gets bit-for-bit reproducible results.
"""

import math


def input_modulus(value: float, minimum: float, maximum: float) -> float:
    """
    Wrap ``value`` into the range between ``minimum`` and ``maximum``.

    Used for continuous inputs such as a heading where ``minimum`` and
    ``maximum`` describe the same physical point.

    Args:
        value: Input to wrap
        minimum: Lower end of the range
        maximum: Upper end of the range

    Returns:
        Wrapped value
    """
    modulus = maximum - minimum

    # Wrap input if it's above the maximum input
    num_max = int((value - minimum) / modulus)
    value -= num_max * modulus

    # Wrap input if it's below the minimum input
    num_min = int((value - maximum) / modulus)
    value -= num_min * modulus

    return value


def angle_modulus(angle: float) -> float:
    """
    Wrap an angle in radians into (-pi, pi].

    The half-open interval keeps every physical heading at exactly one
    representative, so pi and -pi both map to pi.
    """
    wrapped = math.remainder(angle, 2.0 * math.pi)
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    return wrapped


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` to [low, high]."""
    return max(low, min(value, high))


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation between ``start`` and ``end`` for t in [0, 1]."""
    return start + (end - start) * clamp(t, 0.0, 1.0)


def apply_deadband(value: float, deadband: float, max_magnitude: float = 1.0) -> float:
    """
    Zero out ``value`` inside the deadband and rescale the rest.

    Values outside the deadband are rescaled so the output still spans
    [-max_magnitude, max_magnitude] continuously.
    """
    if abs(value) <= deadband:
        return 0.0
    if max_magnitude == math.inf:
        return value - math.copysign(deadband, value)
    return math.copysign(
        (abs(value) - deadband) / (max_magnitude - deadband) * max_magnitude, value
    )


def sgn(value: float) -> float:
    """Sign of ``value`` with sgn(0) == 0."""
    if value > 0.0:
        return 1.0
    if value < 0.0:
        return -1.0
    return 0.0
