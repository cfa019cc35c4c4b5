"""
PPG Heart Rate Module
Heart rate (BPM) and HRV (SDNN, RMSSD) from filtered PPG buffers
"""

from .estimator import HRVMetrics, compute_hrv, estimate_bpm, find_refractory_peaks

__all__ = [
    'HRVMetrics',
    'compute_hrv',
    'estimate_bpm',
    'find_refractory_peaks',
]
