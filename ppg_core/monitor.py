"""
PPG Signal Monitor
Live filtered buffer, periodic smoothed heart rate, and signal quality
"""

import logging
from collections import deque
from typing import Optional, Tuple, Union

import numpy as np

from .config import DSPConfig, MonitorConfig
from .dsp import StreamFilter
from .heart_rate import estimate_bpm
from .samples import Sample

logger = logging.getLogger(__name__)


class SignalMonitor:
    """
    Caller-owned live view over one PPG stream

    Filters every sample, keeps the most recent raw and filtered signal
    for display, and refreshes a smoothed heart-rate readout at a fixed
    cadence. One writer per instance.
    """

    def __init__(self, config: Optional[MonitorConfig] = None, dsp_config: Optional[DSPConfig] = None):
        """
        Initialize signal monitor

        Args:
            config: Monitor configuration (defaults to MonitorConfig())
            dsp_config: Filter configuration (defaults to DSPConfig())

        Raises:
            ConfigurationError: if either configuration is invalid
        """
        self.config = config if config else MonitorConfig()
        self.config.validate()

        self.stream_filter = StreamFilter(self.config.sample_rate, dsp_config)

        # Display buffers
        self.raw_buffer = deque(maxlen=self.config.buffer_size)
        self.filtered_buffer = deque(maxlen=self.config.buffer_size)

        # Heart-rate readout
        self.hr_smoothing_buffer = deque(maxlen=self.config.hr_smoothing_window)
        self.last_raw_bpm = 0
        self._samples_since_update = 0
        self.last_timestamp: Optional[int] = None

        logger.info(
            f"Signal monitor initialized: {self.config.sample_rate} Hz, "
            f"buffer={self.config.buffer_size} samples"
        )

    def push(self, sample: Union[Sample, float]) -> float:
        """
        Feed one sample.

        Args:
            sample: Sample or bare value

        Returns:
            Filtered value for this sample
        """
        if isinstance(sample, Sample):
            value = sample.value
            self.last_timestamp = sample.timestamp
        else:
            value = float(sample)

        filtered = self.stream_filter.process_sample(value)
        self.raw_buffer.append(value)
        self.filtered_buffer.append(filtered)

        self._samples_since_update += 1
        if self._samples_since_update >= self.config.hr_update_samples:
            self._samples_since_update = 0
            self._update_heart_rate()

        return filtered

    def _update_heart_rate(self):
        bpm = estimate_bpm(list(self.filtered_buffer), self.config.sample_rate)
        self.last_raw_bpm = bpm

        if bpm > 0:
            self.hr_smoothing_buffer.append(bpm)
        else:
            # Signal lost: drop stale readings so the readout falls back to 0
            self.hr_smoothing_buffer.clear()

    @property
    def hr_valid(self) -> bool:
        """True while the smoothed readout holds at least one real reading"""
        return len(self.hr_smoothing_buffer) > 0

    @property
    def current_bpm(self) -> int:
        """Smoothed heart rate, 0 when there is no usable signal"""
        if len(self.hr_smoothing_buffer) == 0:
            return 0
        return int(np.mean(self.hr_smoothing_buffer))

    @property
    def raw_values(self) -> np.ndarray:
        return np.array(self.raw_buffer, dtype=np.float64)

    @property
    def filtered_values(self) -> np.ndarray:
        return np.array(self.filtered_buffer, dtype=np.float64)

    def assess_signal_quality(self) -> Tuple[float, bool]:
        """
        Assess quality of the buffered raw signal

        Returns:
            Tuple of (quality_score, is_valid)
            quality_score: 0.0 to 1.0
            is_valid: True if quality >= threshold
        """
        if len(self.raw_buffer) == 0:
            return 0.0, False

        data = self.raw_values
        if not np.all(np.isfinite(data)):
            return 0.0, False

        quality_score = 1.0

        # Saturation: normalized samples should stay within [0, 1]
        if np.min(data) < 0.0 or np.max(data) > 1.0:
            quality_score *= 0.5

        # Flat signal (no contact / covered sensor)
        if np.max(data) - np.min(data) < self.config.flat_threshold:
            quality_score *= 0.3

        is_valid = quality_score >= self.config.quality_threshold

        return quality_score, is_valid

    def reset(self):
        """
        Clear all buffers, the heart-rate readout and the filter state.

        Should be called when starting a new measurement to avoid
        stale data affecting calculations.

        Returns:
            None.
        """
        self.stream_filter.reset()
        self.raw_buffer.clear()
        self.filtered_buffer.clear()
        self.hr_smoothing_buffer.clear()
        self.last_raw_bpm = 0
        self._samples_since_update = 0
        self.last_timestamp = None

    def get_status(self) -> dict:
        """
        Return a summary of the monitor state for logging / UI display.
        """
        quality, valid = self.assess_signal_quality()
        return {
            'sample_rate': self.config.sample_rate,
            'buffered_samples': len(self.filtered_buffer),
            'samples_processed': self.stream_filter.samples_processed,
            'current_bpm': self.current_bpm,
            'last_raw_bpm': self.last_raw_bpm,
            'hr_valid': self.hr_valid,
            'signal_quality': quality,
            'signal_valid': valid,
            'last_timestamp': self.last_timestamp,
        }

    def __repr__(self):
        return f"<SignalMonitor(fs={self.config.sample_rate}, bpm={self.current_bpm})>"
