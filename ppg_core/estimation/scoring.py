"""
Estimation Scoring Helpers
Blood-pressure estimate record, a placeholder scorer, and accuracy metrics

heuristic_bp_scorer is a demonstration mapping from features to a blood
pressure reading. It is not a trained model; real scorers are injected
into WindowedEstimationPipeline by the caller.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# Output ranges of the placeholder scorer
SYSTOLIC_RANGE = (90, 180)  # mmHg
DIASTOLIC_RANGE = (60, 120)  # mmHg
HEURISTIC_CONFIDENCE = 0.825


@dataclass(frozen=True)
class BPEstimate:
    """One blood-pressure estimate"""

    systolic: int  # mmHg
    diastolic: int  # mmHg
    confidence: float  # 0.0 to 1.0
    timestamp: int = 0  # ms since epoch


def _clamp(value: int, bounds) -> int:
    low, high = bounds
    return max(low, min(high, value))


def heuristic_bp_scorer(features: Sequence[float], timestamp: int = 0) -> BPEstimate:
    """
    Map a feature vector to a deterministic blood-pressure reading.

    Uses the mean (feature 0) and amplitude (feature 3) only. A zero
    mean or amplitude falls back to 0.5 and 0.2 respectively.

    Args:
        features: 20-value feature vector
        timestamp: Timestamp to stamp on the estimate (ms)

    Returns:
        BPEstimate clamped to physiological ranges
    """
    mean_feature = float(features[0]) or 0.5
    amplitude_feature = float(features[3]) or 0.2

    systolic = int(round(110 + mean_feature * 50))
    diastolic = int(round(67.5 + amplitude_feature * 30))

    return BPEstimate(
        systolic=_clamp(systolic, SYSTOLIC_RANGE),
        diastolic=_clamp(diastolic, DIASTOLIC_RANGE),
        confidence=HEURISTIC_CONFIDENCE,
        timestamp=timestamp,
    )


def calculate_accuracy(
        predictions: Sequence[BPEstimate],
        ground_truth: Sequence[BPEstimate]
) -> Dict[str, float]:
    """
    Pooled systolic/diastolic error of predictions against reference readings.

    Args:
        predictions: Estimated readings
        ground_truth: Reference readings, paired by position

    Returns:
        {'mae': mean absolute error, 'rmse': root mean squared error} in mmHg

    Raises:
        ValueError: if the two sequences differ in length
    """
    if len(predictions) != len(ground_truth):
        raise ValueError(
            f"Prediction/ground-truth length mismatch: {len(predictions)} != {len(ground_truth)}"
        )

    if len(predictions) == 0:
        return {'mae': 0.0, 'rmse': 0.0}

    errors = np.array(
        [
            [p.systolic - g.systolic, p.diastolic - g.diastolic]
            for p, g in zip(predictions, ground_truth)
        ],
        dtype=np.float64,
    ).ravel()

    mae = float(np.mean(np.abs(errors)))
    rmse = float(np.sqrt(np.mean(errors ** 2)))

    return {'mae': mae, 'rmse': rmse}
