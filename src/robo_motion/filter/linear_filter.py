"""
Digital filters for conditioning scalar sensor streams.

Difference Equation:
    A linear filter with feedforward gains b and feedback gains a computes

        y[n] = sum_i b_i x[n - i] - sum_j a_j y[n - 1 - j]

    Single-pole IIR low pass:
        gain = exp(-period / time_constant)
        y[n] = gain * y[n-1] + (1 - gain) * x[n]

    First-order high pass:
        y[n] = gain * x[n] - gain * x[n-1] + gain * y[n-1]

Moving Average Warm-up:
    ``MovingAverageFilter`` averages over however many samples it has seen so
    far, up to ``taps``. With taps=3 the sequence 1, 2, 3, 4 produces
    1, 1.5, 2, 3 rather than ramping up from zero-filled history.

All filters assume ``calculate`` is called once per fixed period; calling at
a different rate changes the effective time constant.
"""

import math
from collections import deque
from typing import Sequence

from ..exceptions import InvalidParameterError


class LinearFilter:
    """
    General FIR/IIR filter over fixed feedforward and feedback gains.

    Histories are stored newest-first in fixed-capacity deques that start
    filled with zeros.

    Attributes:
        ff_gains: Feedforward gains b_0..b_n
        fb_gains: Feedback gains a_0..a_m
    """

    def __init__(self, ff_gains: Sequence[float], fb_gains: Sequence[float]):
        if len(ff_gains) == 0:
            raise InvalidParameterError("Filter requires at least one feedforward gain")

        self.ff_gains = tuple(float(g) for g in ff_gains)
        self.fb_gains = tuple(float(g) for g in fb_gains)

        self._inputs = deque([0.0] * len(self.ff_gains), maxlen=len(self.ff_gains))
        self._outputs = deque([0.0] * len(self.fb_gains), maxlen=max(1, len(self.fb_gains)))
        self._last_output = 0.0

    @staticmethod
    def single_pole_iir(time_constant: float, period: float) -> "SinglePoleIIRFilter":
        """Low-pass filter with one retained output."""
        return SinglePoleIIRFilter(time_constant, period)

    @staticmethod
    def high_pass(time_constant: float, period: float) -> "LinearFilter":
        """First-order high-pass filter."""
        _validate_time_constant(time_constant, period)
        gain = math.exp(-period / time_constant)
        return LinearFilter([gain, -gain], [-gain])

    @staticmethod
    def moving_average(taps: int) -> "MovingAverageFilter":
        """Arithmetic mean over the last ``taps`` samples."""
        return MovingAverageFilter(taps)

    def calculate(self, value: float) -> float:
        """
        Push one input sample and return the filtered output.

        Args:
            value: Newest input sample

        Returns:
            Filter output for this sample
        """
        self._inputs.appendleft(float(value))

        output = 0.0
        for gain, past_input in zip(self.ff_gains, self._inputs):
            output += gain * past_input
        for gain, past_output in zip(self.fb_gains, self._outputs):
            output -= gain * past_output

        if self.fb_gains:
            self._outputs.appendleft(output)
        self._last_output = output
        return output

    def last_value(self) -> float:
        """Most recent output, or 0 before the first sample."""
        return self._last_output

    def reset(self) -> None:
        """Clear input and output history back to zeros."""
        for _ in range(len(self._inputs)):
            self._inputs.appendleft(0.0)
        for _ in range(len(self._outputs)):
            self._outputs.appendleft(0.0)
        self._last_output = 0.0


class SinglePoleIIRFilter(LinearFilter):
    """
    Exponential smoothing low-pass filter.

    Args:
        time_constant: Filter time constant [s], must be positive
        period: Sampling period [s], must be positive
    """

    def __init__(self, time_constant: float, period: float):
        _validate_time_constant(time_constant, period)
        self.time_constant = time_constant
        self.period = period
        self.gain = math.exp(-period / time_constant)
        super().__init__([1.0 - self.gain], [-self.gain])


class MovingAverageFilter:
    """
    Mean of the most recent ``taps`` samples held in a fixed-capacity ring.

    Until ``taps`` samples have arrived the mean is taken over the samples
    received so far.
    """

    def __init__(self, taps: int):
        if int(taps) != taps or taps < 1:
            raise InvalidParameterError(f"Moving average taps must be an integer >= 1, got {taps}")

        self.taps = int(taps)
        self._samples = deque(maxlen=self.taps)
        self._last_output = 0.0

    def calculate(self, value: float) -> float:
        self._samples.append(float(value))
        self._last_output = sum(self._samples) / len(self._samples)
        return self._last_output

    def last_value(self) -> float:
        return self._last_output

    def reset(self) -> None:
        self._samples.clear()
        self._last_output = 0.0

    def __len__(self) -> int:
        return len(self._samples)


def _validate_time_constant(time_constant: float, period: float) -> None:
    if time_constant <= 0:
        raise InvalidParameterError(f"Time constant must be positive, got {time_constant}")
    if period <= 0:
        raise InvalidParameterError(f"Period must be positive, got {period}")
