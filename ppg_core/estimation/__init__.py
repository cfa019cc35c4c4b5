"""
PPG Estimation Module
Batch scoring of overlapping windows through an injected scorer
"""

from .pipeline import (
    PipelineResult,
    ScorerFailure,
    WindowEstimate,
    WindowedEstimationPipeline,
    run_windowed_estimation,
)
from .scoring import BPEstimate, calculate_accuracy, heuristic_bp_scorer

__all__ = [
    'PipelineResult',
    'ScorerFailure',
    'WindowEstimate',
    'WindowedEstimationPipeline',
    'run_windowed_estimation',
    'BPEstimate',
    'calculate_accuracy',
    'heuristic_bp_scorer',
]
