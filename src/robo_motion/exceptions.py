"""
Exception hierarchy for robo motion.

Every error raised deliberately by the package derives from RoboMotionError.
Parameter and dimension errors also derive from ValueError so callers that
already guard construction with ``except ValueError`` keep working.
"""


class RoboMotionError(Exception):
    """Base class for all robo motion errors."""


class InvalidParameterError(RoboMotionError, ValueError):
    """A constructor or setter received a physically meaningless value."""


class DimensionMismatchError(RoboMotionError, ValueError):
    """A state, input or output vector does not match the configured plant."""


class TrajectoryGenerationError(RoboMotionError, RuntimeError):
    """The time parameterization could not produce a finite trajectory."""
