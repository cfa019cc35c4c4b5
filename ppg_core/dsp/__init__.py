"""
PPG DSP Module
Coefficient design and per-stream filtering

Architecture:
- Designer: Pure coefficient design (resonant bandpass, powerline notch)
- StreamFilter: Stateful per-stream filter, one sample in, one sample out
"""

from .designer import FilterCoefficients, design_bandpass, design_notch
from .stream_filter import StreamFilter, filter_signal

__all__ = [
    'FilterCoefficients',
    'design_bandpass',
    'design_notch',
    'StreamFilter',
    'filter_signal',
]
