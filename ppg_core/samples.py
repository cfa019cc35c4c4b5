"""
PPG Samples
Normalized sample record shared by all acquisition collaborators
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

import numpy as np


class SampleSource(str, Enum):
    """Where a sample came from"""

    CAMERA = 'camera'
    BLE = 'ble'


@dataclass(frozen=True)
class Sample:
    """
    One normalized PPG sample.

    value is expected in roughly [0, 1] but nothing in the core relies on it.
    simulated marks values an acquisition collaborator synthesized after a
    failed sensor read; processing ignores it, provenance keeps it.
    """

    timestamp: int  # ms since epoch
    value: float
    source: SampleSource = SampleSource.CAMERA
    device_id: Optional[str] = None  # BLE devices only
    simulated: bool = False


def sample_values(samples: Iterable) -> np.ndarray:
    """
    Extract values from Samples (or pass plain numbers through).

    Args:
        samples: Sample objects or numbers

    Returns:
        float64 array of values
    """
    return np.array(
        [s.value if isinstance(s, Sample) else float(s) for s in samples],
        dtype=np.float64,
    )


def make_samples(
        values: Iterable[float],
        sample_rate: float,
        start_timestamp: int = 0,
        source: SampleSource = SampleSource.CAMERA,
) -> List[Sample]:
    """
    Wrap a uniformly sampled signal into Samples with derived timestamps.

    Args:
        values: Signal values
        sample_rate: Sampling rate in Hz
        start_timestamp: Timestamp of the first sample (ms)
        source: Source tag for every sample

    Returns:
        List of Sample
    """
    period_ms = 1000.0 / sample_rate
    return [
        Sample(timestamp=start_timestamp + int(round(i * period_ms)), value=float(v), source=source)
        for i, v in enumerate(values)
    ]
