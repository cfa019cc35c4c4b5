"""
Windowed Estimation Pipeline
Feature extraction and scoring over overlapping windows of a recording
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_STRIDE, DEFAULT_WINDOW_SIZE, DSPConfig
from ..dsp import filter_signal
from ..errors import ConfigurationError
from ..features import extract_features
from ..samples import Sample, sample_values

logger = logging.getLogger(__name__)

Scorer = Callable[[np.ndarray], Any]


@dataclass
class WindowEstimate:
    """A scorer result tagged with the window it came from"""

    window_index: int
    start_index: int
    end_index: int  # inclusive
    end_timestamp: Optional[int]  # ms, None for bare-value input
    features: np.ndarray
    estimate: Any
    simulated_count: int = 0  # samples in the window flagged as simulated


@dataclass
class ScorerFailure:
    """A window whose scorer call raised; the run carried on without it"""

    window_index: int
    end_index: int
    end_timestamp: Optional[int]
    error: Exception


@dataclass
class PipelineResult:
    """
    Ordered estimates plus per-window scorer failures.

    Iterating or taking len() covers the estimates only.
    """

    estimates: List[WindowEstimate]
    failures: List[ScorerFailure]

    @property
    def window_count(self) -> int:
        return len(self.estimates) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def __iter__(self) -> Iterator[WindowEstimate]:
        return iter(self.estimates)

    def __len__(self):
        return len(self.estimates)

    def __getitem__(self, index):
        return self.estimates[index]


class WindowedEstimationPipeline:
    """
    Slides a fixed window across a recording and scores each full window.

    The scorer is any callable taking the 20-value feature vector. Windows
    start every `stride` samples; a trailing window shorter than
    `window_size` is skipped. A scorer exception costs only its own window.
    """

    def __init__(
            self,
            score: Scorer,
            window_size: int = DEFAULT_WINDOW_SIZE,
            stride: int = DEFAULT_STRIDE,
            sample_rate: Optional[float] = None,
            filter_config: Optional[DSPConfig] = None,
    ):
        """
        Initialize pipeline

        Args:
            score: Scorer applied to each feature vector
            window_size: Window length in samples
            stride: Step between window starts in samples
            sample_rate: Sampling rate in Hz, required with filter_config
            filter_config: When given, windows are cut from the filtered
                recording instead of the raw values

        Raises:
            ConfigurationError: on a non-callable scorer, window_size < 1,
                stride < 1, or an invalid filter configuration
        """
        if not callable(score):
            raise ConfigurationError("Scorer must be callable")
        if window_size < 1:
            raise ConfigurationError(f"Window size must be >= 1, got {window_size}")
        if stride < 1:
            raise ConfigurationError(f"Stride must be >= 1, got {stride}")

        if filter_config is not None:
            if sample_rate is None:
                raise ConfigurationError("A sample rate is required to filter before windowing")
            filter_config.validate(sample_rate)

        self.score = score
        self.window_size = int(window_size)
        self.stride = int(stride)
        self.sample_rate = sample_rate
        self.filter_config = filter_config

        logger.info(
            f"Estimation pipeline initialized: window={self.window_size}, stride={self.stride}, "
            f"filtered={'yes' if filter_config is not None else 'no'}"
        )

    def expected_windows(self, sample_count: int) -> int:
        """
        Number of full windows a recording of sample_count samples yields.

        Returns:
            floor((N - window_size) / stride) + 1, or 0 when N < window_size
        """
        if sample_count < self.window_size:
            return 0
        return (sample_count - self.window_size) // self.stride + 1

    def run(self, samples: Sequence) -> PipelineResult:
        """
        Score every full window of a recording.

        Args:
            samples: Sample objects or bare values, in time order

        Returns:
            PipelineResult with estimates in window order
        """
        samples = list(samples)
        values = sample_values(samples)
        timestamps = [s.timestamp if isinstance(s, Sample) else None for s in samples]
        simulated = np.array([isinstance(s, Sample) and s.simulated for s in samples], dtype=bool)

        if self.filter_config is not None:
            values = filter_signal(values, self.sample_rate, self.filter_config)

        estimates = []
        failures = []
        total_windows = self.expected_windows(len(values))

        if total_windows == 0:
            logger.debug(f"Recording too short for a window: {len(values)} < {self.window_size}")

        for window_index in range(total_windows):
            start = window_index * self.stride
            end = start + self.window_size - 1

            features = extract_features(values[start:end + 1])

            try:
                estimate = self.score(features)
            except Exception as e:
                logger.warning(f"Scorer failed for window {window_index} (samples {start}-{end}): {e}")
                failures.append(ScorerFailure(
                    window_index=window_index,
                    end_index=end,
                    end_timestamp=timestamps[end],
                    error=e,
                ))
                continue

            estimates.append(WindowEstimate(
                window_index=window_index,
                start_index=start,
                end_index=end,
                end_timestamp=timestamps[end],
                features=features,
                estimate=estimate,
                simulated_count=int(np.count_nonzero(simulated[start:end + 1])),
            ))

        logger.info(
            f"✓ Estimation complete: {len(estimates)}/{total_windows} windows scored, "
            f"{len(failures)} failed"
        )

        return PipelineResult(estimates=estimates, failures=failures)

    def __repr__(self):
        return f"<WindowedEstimationPipeline(window={self.window_size}, stride={self.stride})>"


def run_windowed_estimation(
        samples: Sequence,
        score: Scorer,
        window_size: int = DEFAULT_WINDOW_SIZE,
        stride: int = DEFAULT_STRIDE,
) -> PipelineResult:
    """
    Score every full window of a recording with a one-off pipeline.

    Args:
        samples: Sample objects or bare values, in time order
        score: Scorer applied to each feature vector
        window_size: Window length in samples
        stride: Step between window starts in samples

    Returns:
        PipelineResult with estimates in window order
    """
    return WindowedEstimationPipeline(score, window_size=window_size, stride=stride).run(samples)
