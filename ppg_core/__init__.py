"""
PPG Core
Streaming signal processing and feature extraction for photoplethysmography

Components:
- DSP: Resonant bandpass design and per-stream filtering
- Heart Rate: Adaptive peak detection (BPM) and HRV (SDNN, RMSSD)
- Features: 20-value feature vectors for downstream scorers
- Estimation: Windowed batch scoring with an injected scorer
- Monitor: Live filtered buffer with a smoothed heart-rate readout

All processing is synchronous and in memory. Insufficient signal is
reported through sentinels (0 bpm, all-zero features), never exceptions.
"""

from .config import DSPConfig, MonitorConfig
from .dsp import FilterCoefficients, StreamFilter, design_bandpass, design_notch, filter_signal
from .errors import ConfigurationError, PPGCoreError
from .estimation import (
    BPEstimate,
    PipelineResult,
    ScorerFailure,
    WindowEstimate,
    WindowedEstimationPipeline,
    calculate_accuracy,
    heuristic_bp_scorer,
    run_windowed_estimation,
)
from .features import FEATURE_COUNT, FEATURE_NAMES, extract_features
from .heart_rate import HRVMetrics, compute_hrv, estimate_bpm
from .monitor import SignalMonitor
from .samples import Sample, SampleSource, make_samples

__all__ = [
    # Configuration
    'DSPConfig',
    'MonitorConfig',

    # Errors
    'PPGCoreError',
    'ConfigurationError',

    # Samples
    'Sample',
    'SampleSource',
    'make_samples',

    # DSP
    'FilterCoefficients',
    'StreamFilter',
    'design_bandpass',
    'design_notch',
    'filter_signal',

    # Heart rate
    'HRVMetrics',
    'compute_hrv',
    'estimate_bpm',

    # Features
    'FEATURE_COUNT',
    'FEATURE_NAMES',
    'extract_features',

    # Estimation
    'BPEstimate',
    'PipelineResult',
    'ScorerFailure',
    'WindowEstimate',
    'WindowedEstimationPipeline',
    'calculate_accuracy',
    'heuristic_bp_scorer',
    'run_windowed_estimation',

    # Monitor
    'SignalMonitor',
]

__version__ = '1.0.0'
