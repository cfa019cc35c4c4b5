"""
PPG Core Errors
Exception hierarchy for the signal-processing core

Only configuration problems are exceptions. Short, flat or noisy signal is
reported through sentinel outputs (0 bpm, all-zero feature vector) so the
per-sample path is never interrupted.
"""


class PPGCoreError(Exception):
    """Base class for all errors raised by ppg_core"""


class ConfigurationError(PPGCoreError, ValueError):
    """
    Invalid filter, monitor or pipeline configuration.

    Raised eagerly at construction time only, never from process_sample().
    """
