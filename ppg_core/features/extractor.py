"""
PPG Feature Extractor
Fixed-length feature vectors for downstream scoring
"""

import logging
from typing import List, Sequence

import numpy as np

logger = logging.getLogger(__name__)

MIN_WINDOW_LENGTH = 100  # samples needed for a non-zero vector
BAND_COUNT = 10  # number of segment-energy features
PEAK_THRESHOLD_FRACTION = 0.3  # peaks must exceed mean + 0.3 * (max - mean)

# Position is part of the contract: scorers index vectors positionally
FEATURE_NAMES = (
    'mean',
    'variance',
    'std',
    'amplitude',
    'max_rising_slope',
    'mean_peak_interval',
    'peak_interval_std',
    'peak_count',
    'max',
    'min',
) + tuple(f'band_energy_{i}' for i in range(BAND_COUNT))

FEATURE_COUNT = len(FEATURE_NAMES)


def _find_peaks(values: np.ndarray, mean: float, max_val: float) -> List[int]:
    """Strict local maxima above mean + 0.3 * (max - mean), no refractory period"""
    threshold = mean + PEAK_THRESHOLD_FRACTION * (max_val - mean)
    interior = values[1:-1]
    is_peak = (interior > values[:-2]) & (interior > values[2:]) & (interior > threshold)
    return (np.nonzero(is_peak)[0] + 1).tolist()


def _band_energies(values: np.ndarray) -> np.ndarray:
    """
    Mean squared value of each of ten contiguous equal-length segments.

    A cheap stand-in for spectral band power. Samples past 10 * (n // 10)
    are not covered.
    """
    band_size = len(values) // BAND_COUNT
    segments = values[:band_size * BAND_COUNT].reshape(BAND_COUNT, band_size)
    return np.mean(segments ** 2, axis=1)


def extract_features(window: Sequence[float]) -> np.ndarray:
    """
    Extract the 20-value feature vector from a window of PPG samples.

    Order: mean, variance, std, amplitude, max rising slope, mean peak
    interval, peak interval std, peak count, max, min, then ten segment
    energies. Windows shorter than 100 samples give 20 zeros, the
    "insufficient data" sentinel. Never raises and never returns NaN/Inf.

    Args:
        window: Raw or filtered samples, oldest first

    Returns:
        float64 array of shape (20,)
    """
    try:
        values = np.asarray(window, dtype=np.float64).ravel()
    except (TypeError, ValueError) as e:
        logger.debug(f"Feature extraction skipped: {e}")
        return np.zeros(FEATURE_COUNT, dtype=np.float64)

    if len(values) < MIN_WINDOW_LENGTH:
        return np.zeros(FEATURE_COUNT, dtype=np.float64)

    if not np.all(np.isfinite(values)):
        values = np.where(np.isfinite(values), values, 0.0)

    with np.errstate(over='ignore', invalid='ignore'):
        # Time-domain statistics
        mean = float(np.mean(values))
        variance = float(np.mean((values - mean) ** 2))
        std = float(np.sqrt(variance))

        max_val = float(np.max(values))
        min_val = float(np.min(values))
        amplitude = max_val - min_val

        # Steepest rise between consecutive samples, never below zero
        max_slope = max(0.0, float(np.max(np.diff(values))))

        # Pulse intervals
        peaks = _find_peaks(values, mean, max_val)
        if len(peaks) >= 2:
            intervals = np.diff(peaks).astype(np.float64)
            mean_interval = float(np.mean(intervals))
            interval_std = float(np.std(intervals))
        else:
            mean_interval = 0.0
            interval_std = 0.0

        features = np.array(
            [
                mean,
                variance,
                std,
                amplitude,
                max_slope,
                mean_interval,
                interval_std,
                float(len(peaks)),
                max_val,
                min_val,
            ],
            dtype=np.float64,
        )
        features = np.concatenate([features, _band_energies(values)])

    # Overflow on extreme inputs is clamped rather than propagated
    return np.nan_to_num(features, nan=0.0, posinf=np.finfo(np.float64).max, neginf=-np.finfo(np.float64).max)
