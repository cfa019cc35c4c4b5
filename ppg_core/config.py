"""
PPG Core Configuration
Filter, monitor and batch-estimation parameters
"""

import math
import numbers
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError

# Sampling rates
DEFAULT_SAMPLE_RATE = 60  # Hz
CAMERA_SAMPLE_RATE = 30  # Hz (camera frame rate)
BLE_SAMPLE_RATE = 100  # Hz (typical for medical BLE sensors)

# DSP defaults
BANDPASS_LOW = 0.5  # Hz
BANDPASS_HIGH = 5.0  # Hz
NOTCH_FREQUENCY = 60.0  # Hz (US powerline)
SMOOTHING_WINDOW = 5  # samples

# Buffers and batch windows
BUFFER_SIZE = 1000  # samples to keep in memory
DEFAULT_WINDOW_SIZE = 300  # 10 seconds at 30 Hz
DEFAULT_STRIDE = 150  # 50% overlap


def _is_positive_count(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 1


def _is_positive_number(value) -> bool:
    return (
        isinstance(value, numbers.Real) and not isinstance(value, bool)
        and math.isfinite(value) and value > 0
    )


@dataclass
class DSPConfig:
    """
    Configuration for one StreamFilter.

    A StreamFilter copies its config at construction; changing a config
    afterwards has no effect on an existing filter. Build a new filter to
    reconfigure.
    """

    # Bandpass edges
    bandpass_low: float = BANDPASS_LOW  # Hz
    bandpass_high: float = BANDPASS_HIGH  # Hz

    # Optional powerline notch, only applied when below Nyquist
    notch_frequency: Optional[float] = None  # Hz

    # Moving-average length applied after the bandpass
    smoothing_window: int = SMOOTHING_WINDOW  # samples

    # Seed filter history from the first sample to suppress the DC step
    warm_start: bool = True

    def validate(self, sample_rate: float):
        """
        Check this config against a sampling rate.

        Args:
            sample_rate: Sampling rate in Hz

        Raises:
            ConfigurationError: if 0 < bandpass_low < bandpass_high < sample_rate / 2
                does not hold, or smoothing_window is not an integer >= 1.
        """
        if not _is_positive_number(sample_rate):
            raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}")

        if not (isinstance(self.bandpass_low, numbers.Real) and isinstance(self.bandpass_high, numbers.Real)):
            raise ConfigurationError(
                f"Bandpass edges must be numbers, got low={self.bandpass_low!r}, high={self.bandpass_high!r}"
            )

        nyquist = sample_rate / 2.0
        if not 0 < self.bandpass_low < self.bandpass_high < nyquist:
            raise ConfigurationError(
                f"Bandpass must satisfy 0 < low < high < Nyquist: "
                f"low={self.bandpass_low}, high={self.bandpass_high}, nyquist={nyquist}"
            )

        if not _is_positive_count(self.smoothing_window):
            raise ConfigurationError(
                f"Smoothing window must be an integer >= 1, got {self.smoothing_window}"
            )

        if self.notch_frequency is not None and not _is_positive_number(self.notch_frequency):
            raise ConfigurationError(
                f"Notch frequency must be positive when set, got {self.notch_frequency}"
            )

    @classmethod
    def default(cls) -> 'DSPConfig':
        """
        Application defaults: 0.5-5 Hz bandpass, 5-sample smoothing, no notch.

        Returns:
            DSPConfig with default values.
        """
        return cls()

    @classmethod
    def with_powerline_notch(cls, notch_frequency: float = NOTCH_FREQUENCY) -> 'DSPConfig':
        """
        Defaults plus a powerline notch (60 Hz unless given).

        Returns:
            DSPConfig with notch_frequency set.
        """
        return cls(notch_frequency=notch_frequency)


@dataclass
class MonitorConfig:
    """
    Configuration for a live SignalMonitor.

    Controls how much signal is kept for display and how often and how
    heavily the heart-rate readout is refreshed and smoothed.
    """

    sample_rate: float = DEFAULT_SAMPLE_RATE  # Hz

    # Display buffer
    buffer_seconds: float = 10.0  # seconds of raw/filtered signal to keep

    # Heart-rate readout
    hr_update_interval: float = 1.0  # seconds between bpm recomputations
    hr_smoothing_window: int = 5  # number of bpm readings to average

    # Quality thresholds
    quality_threshold: float = 0.5  # minimum quality score for a valid signal
    flat_threshold: float = 1e-4  # peak-to-peak below this is a flat signal

    @property
    def buffer_size(self) -> int:
        """
        Number of samples kept in the raw and filtered buffers.

        Returns:
            sample_rate * buffer_seconds, at least 1.
        """
        return max(1, int(round(self.sample_rate * self.buffer_seconds)))

    @property
    def hr_update_samples(self) -> int:
        """
        Number of samples between heart-rate recomputations.

        Returns:
            sample_rate * hr_update_interval, at least 1.
        """
        return max(1, int(round(self.sample_rate * self.hr_update_interval)))

    def validate(self):
        """
        Check monitor parameters.

        Raises:
            ConfigurationError: on a non-positive rate, interval or window.
        """
        if not _is_positive_number(self.sample_rate):
            raise ConfigurationError(f"Sample rate must be positive, got {self.sample_rate}")
        if not _is_positive_number(self.buffer_seconds):
            raise ConfigurationError(f"Buffer duration must be positive, got {self.buffer_seconds}")
        if not _is_positive_number(self.hr_update_interval):
            raise ConfigurationError(
                f"Heart-rate update interval must be positive, got {self.hr_update_interval}"
            )
        if not _is_positive_count(self.hr_smoothing_window):
            raise ConfigurationError(
                f"Heart-rate smoothing window must be an integer >= 1, got {self.hr_smoothing_window}"
            )

    @classmethod
    def for_camera(cls) -> 'MonitorConfig':
        """
        Create a configuration for camera-based PPG.

        Returns:
            MonitorConfig at the camera frame rate.
        """
        return cls(sample_rate=CAMERA_SAMPLE_RATE)

    @classmethod
    def for_ble(cls) -> 'MonitorConfig':
        """
        Create a configuration for a BLE PPG sensor.

        Returns:
            MonitorConfig at the BLE sensor rate.
        """
        return cls(sample_rate=BLE_SAMPLE_RATE)
