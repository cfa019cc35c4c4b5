"""
PPG Features Module
Time-domain statistics and segment-energy proxies for scoring
"""

from .extractor import FEATURE_COUNT, FEATURE_NAMES, MIN_WINDOW_LENGTH, extract_features

__all__ = [
    'FEATURE_COUNT',
    'FEATURE_NAMES',
    'MIN_WINDOW_LENGTH',
    'extract_features',
]
