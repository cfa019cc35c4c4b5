"""
Peak Heart Rate Estimator
Adaptive-threshold peak detection over a buffer of filtered PPG
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Detection parameters
MIN_BUFFER_SECONDS = 2.0  # seconds of signal needed for an estimate
FLAT_SIGNAL_RANGE = 1e-4  # max - min below this is no signal
THRESHOLD_OFFSET = 0.4  # peaks must exceed mean + this (normalized units)
REFRACTORY_FRACTION = 0.25  # min peak spacing in seconds (caps at 240 bpm)

# Plausible human heart rate range
MIN_BPM = 40
MAX_BPM = 200

# HRV needs at least this many beats (two intervals)
MIN_HRV_BEATS = 3


@dataclass(frozen=True)
class HRVMetrics:
    """Time-domain heart rate variability from detected beats"""

    sdnn_ms: float  # standard deviation of inter-beat intervals
    rmssd_ms: float  # root mean square of successive differences
    beat_count: int


def find_refractory_peaks(normalized: np.ndarray, threshold: float, min_distance: float) -> List[int]:
    """
    Find local maxima above a threshold, spaced by a refractory period.

    A sample is a peak when it is strictly greater than both neighbours,
    exceeds threshold, and lies more than min_distance samples after the
    previously accepted peak.

    Args:
        normalized: Signal to scan
        threshold: Minimum peak value
        min_distance: Refractory period in samples

    Returns:
        Indices of accepted peaks in ascending order
    """
    peaks = []
    last_peak = None

    for i in range(1, len(normalized) - 1):
        value = normalized[i]
        if value > normalized[i - 1] and value > normalized[i + 1] and value > threshold:
            if last_peak is None or (i - last_peak) > min_distance:
                peaks.append(i)
                last_peak = i

    return peaks


def _detect_beats(buffer: Sequence[float], sample_rate: float) -> List[int]:
    """
    Normalize a buffer and return beat indices; empty on insufficient signal.
    """
    if not sample_rate or sample_rate <= 0:
        return []

    data = np.asarray(buffer, dtype=np.float64)
    if data.ndim != 1 or len(data) < MIN_BUFFER_SECONDS * sample_rate:
        return []

    if not np.all(np.isfinite(data)):
        return []

    min_val = float(np.min(data))
    max_val = float(np.max(data))
    signal_range = max_val - min_val
    if signal_range < FLAT_SIGNAL_RANGE:
        return []

    # Normalize to [-1, 1] so weak signals are treated like strong ones
    normalized = 2.0 * (data - min_val) / signal_range - 1.0

    threshold = float(np.mean(normalized)) + THRESHOLD_OFFSET
    return find_refractory_peaks(normalized, threshold, sample_rate * REFRACTORY_FRACTION)


def estimate_bpm(buffer: Sequence[float], sample_rate: float) -> int:
    """
    Estimate heart rate from a buffer of filtered PPG.

    Never raises. Every insufficient or implausible case returns 0, which
    callers must read as "not enough usable signal yet".

    Args:
        buffer: Filtered samples, oldest first
        sample_rate: Sampling rate in Hz

    Returns:
        Heart rate in bpm, or 0
    """
    try:
        peaks = _detect_beats(buffer, sample_rate)
    except (TypeError, ValueError) as e:
        logger.debug(f"Heart rate estimation skipped: {e}")
        return 0

    if len(peaks) < 2:
        return 0

    intervals = np.diff(peaks)
    mean_interval = float(np.mean(intervals))
    bpm = int(round(60.0 * sample_rate / mean_interval))

    # Sanity check
    if bpm < MIN_BPM or bpm > MAX_BPM:
        return 0

    return bpm


def compute_hrv(buffer: Sequence[float], sample_rate: float) -> Optional[HRVMetrics]:
    """
    Compute SDNN and RMSSD from beats detected in a filtered buffer

    Args:
        buffer: Filtered samples, oldest first
        sample_rate: Sampling rate in Hz

    Returns:
        HRVMetrics, or None if fewer than three beats were found
    """
    try:
        peaks = _detect_beats(buffer, sample_rate)
    except (TypeError, ValueError) as e:
        logger.debug(f"HRV computation skipped: {e}")
        return None

    if len(peaks) < MIN_HRV_BEATS:
        logger.debug(f"Not enough beats for HRV calculation: {len(peaks)}")
        return None

    # Inter-beat intervals in milliseconds
    ibi_ms = np.diff(peaks) * (1000.0 / sample_rate)

    sdnn = float(np.std(ibi_ms))
    successive_diffs = np.diff(ibi_ms)
    rmssd = float(np.sqrt(np.mean(successive_diffs ** 2)))

    return HRVMetrics(sdnn_ms=sdnn, rmssd_ms=rmssd, beat_count=len(peaks))
