"""
Stream Filter
Per-stream bandpass + moving-average filtering, one sample in, one sample out
"""

import logging
import math
from dataclasses import replace
from typing import Iterable, Optional

import numpy as np

from ..config import DSPConfig
from .designer import FilterCoefficients, design_bandpass, design_notch

logger = logging.getLogger(__name__)


class _SecondOrderSection:
    """
    Direct-form I biquad over two 3-slot ring buffers.

    The slot at self._head holds the newest input/output; (head - 1) % 3 and
    (head - 2) % 3 hold the two before it.
    """

    __slots__ = ('b0', 'b1', 'b2', 'a0', 'a1', 'a2', 'dc_gain', '_x', '_y', '_head', 'primed')

    def __init__(self, coefficients: FilterCoefficients):
        self.b0, self.b1, self.b2 = coefficients.b
        self.a0, self.a1, self.a2 = coefficients.a
        self.dc_gain = coefficients.dc_gain
        self._x = [0.0, 0.0, 0.0]
        self._y = [0.0, 0.0, 0.0]
        self._head = 0
        self.primed = False

    def prime(self, value: float):
        """Fill history as if value had been constant forever"""
        steady = value * self.dc_gain
        for i in range(3):
            self._x[i] = value
            self._y[i] = steady
        self.primed = True

    def step(self, value: float) -> float:
        head = (self._head + 1) % 3
        prev = (head - 1) % 3
        prev2 = (head - 2) % 3

        self._x[head] = value
        y = (
            self.b0 * value + self.b1 * self._x[prev] + self.b2 * self._x[prev2]
            - self.a1 * self._y[prev] - self.a2 * self._y[prev2]
        ) / self.a0

        self._y[head] = y
        self._head = head
        self.primed = True
        return y

    @property
    def last_input(self) -> float:
        return self._x[self._head]

    def reset(self):
        for i in range(3):
            self._x[i] = 0.0
            self._y[i] = 0.0
        self._head = 0
        self.primed = False


class _MovingAverage:
    """Fixed-capacity ring buffer returning the mean of its contents"""

    __slots__ = ('_values', '_next', '_count', '_sum', '_compensation')

    def __init__(self, size: int):
        self._values = [0.0] * size
        self._next = 0
        self._count = 0
        self._sum = 0.0
        self._compensation = 0.0

    def _add(self, term: float):
        # Neumaier compensated summation keeps the running sum from drifting
        total = self._sum + term
        if abs(self._sum) >= abs(term):
            self._compensation += (self._sum - total) + term
        else:
            self._compensation += (term - total) + self._sum
        self._sum = total

    def push(self, value: float) -> float:
        # Unfilled slots are 0.0, so evicting one leaves the sum unchanged
        evicted = self._values[self._next]
        self._values[self._next] = value
        self._next = (self._next + 1) % len(self._values)
        if self._count < len(self._values):
            self._count += 1

        self._add(value)
        self._add(-evicted)
        return (self._sum + self._compensation) / self._count

    def __len__(self):
        return self._count

    def reset(self):
        for i in range(len(self._values)):
            self._values[i] = 0.0
        self._next = 0
        self._count = 0
        self._sum = 0.0
        self._compensation = 0.0


class StreamFilter:
    """
    Streaming PPG filter for a single sensor stream.

    Pipeline per sample: resonant bandpass -> optional powerline notch ->
    moving average. O(1) work and no allocation per sample.

    Not safe for concurrent callers: one writer per instance. Independent
    streams need independent instances.
    """

    def __init__(self, sample_rate: float, config: Optional[DSPConfig] = None):
        """
        Initialize stream filter

        Args:
            sample_rate: Sampling rate in Hz
            config: DSP configuration (defaults to DSPConfig())

        Raises:
            ConfigurationError: if the config is invalid for this sample rate
        """
        config = config if config else DSPConfig()
        config.validate(sample_rate)

        # Private copy so later edits to the caller's config change nothing
        self._config = replace(config)
        self._sample_rate = float(sample_rate)

        self._coefficients = design_bandpass(
            self._sample_rate, self._config.bandpass_low, self._config.bandpass_high
        )
        self._bandpass = _SecondOrderSection(self._coefficients)

        self._notch = None
        if self._config.notch_frequency is not None:
            notch_coefficients = design_notch(self._sample_rate, self._config.notch_frequency)
            if notch_coefficients is not None:
                self._notch = _SecondOrderSection(notch_coefficients)

        self._smoothing = _MovingAverage(int(self._config.smoothing_window))
        self._samples_processed = 0

        logger.info(
            f"Stream filter initialized: {self._config.bandpass_low}-{self._config.bandpass_high} Hz "
            f"@ {self._sample_rate} Hz, smoothing={self._config.smoothing_window}, "
            f"notch={'on' if self._notch else 'off'}"
        )

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def config(self) -> DSPConfig:
        """Copy of the configuration this filter was built with"""
        return replace(self._config)

    @property
    def coefficients(self) -> FilterCoefficients:
        return self._coefficients

    @property
    def notch_enabled(self) -> bool:
        return self._notch is not None

    @property
    def samples_processed(self) -> int:
        return self._samples_processed

    def process_sample(self, raw: float) -> float:
        """
        Filter one raw sample.

        Args:
            raw: Raw sample value

        Returns:
            Filtered, smoothed sample value
        """
        raw = float(raw)
        if not math.isfinite(raw):
            # Hold the previous input so the filter state stays finite
            raw = self._bandpass.last_input if self._bandpass.primed else 0.0

        if self._config.warm_start and not self._bandpass.primed:
            self._bandpass.prime(raw)
        filtered = self._bandpass.step(raw)

        if self._notch is not None:
            if self._config.warm_start and not self._notch.primed:
                self._notch.prime(filtered)
            filtered = self._notch.step(filtered)

        self._samples_processed += 1
        return self._smoothing.push(filtered)

    def process_many(self, values: Iterable[float]) -> np.ndarray:
        """
        Filter a sequence of raw samples in order.

        Args:
            values: Raw sample values

        Returns:
            Array of filtered values, same length as the input
        """
        return np.array([self.process_sample(v) for v in values], dtype=np.float64)

    def reset(self):
        """
        Clear all filter history and the smoothing buffer.

        After reset, replaying an input sequence reproduces the output
        sequence produced by a freshly constructed filter.

        Returns:
            None.
        """
        self._bandpass.reset()
        if self._notch is not None:
            self._notch.reset()
        self._smoothing.reset()
        self._samples_processed = 0

    def __repr__(self):
        return (
            f"<StreamFilter({self._config.bandpass_low}-{self._config.bandpass_high} Hz, "
            f"fs={self._sample_rate}, processed={self._samples_processed})>"
        )


def filter_signal(values: Iterable[float], sample_rate: float, config: Optional[DSPConfig] = None) -> np.ndarray:
    """
    Run a finite signal through a fresh StreamFilter.

    Args:
        values: Raw sample values
        sample_rate: Sampling rate in Hz
        config: DSP configuration

    Returns:
        Array of filtered values
    """
    return StreamFilter(sample_rate, config).process_many(values)
