"""
Filter Designer
Second-order coefficient design for the streaming PPG filter
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from scipy import signal

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterCoefficients:
    """
    Direct-form coefficients of a second-order IIR section.

    b: feedforward (b0, b1, b2)
    a: feedback (a0, a1, a2)
    """

    b: Tuple[float, float, float]
    a: Tuple[float, float, float]

    @property
    def dc_gain(self) -> float:
        """
        Steady-state gain for a constant input.

        Returns:
            sum(b) / sum(a), or 0.0 when sum(a) is zero.
        """
        denominator = sum(self.a)
        if denominator == 0:
            return 0.0
        return sum(self.b) / denominator


def design_bandpass(sample_rate: float, bandpass_low: float, bandpass_high: float) -> FilterCoefficients:
    """
    Design the resonant bandpass used for PPG streaming.

    A lightweight second-order resonator rather than a Butterworth design:
    the pole sits at the geometric centre of the band with a radius set by
    the bandwidth, and the zeros sit at DC and Nyquist.

    Args:
        sample_rate: Sampling rate in Hz
        bandpass_low: Lower band edge in Hz
        bandpass_high: Upper band edge in Hz

    Returns:
        FilterCoefficients

    Raises:
        ConfigurationError: unless 0 < bandpass_low < bandpass_high < sample_rate / 2
    """
    if sample_rate is None or not sample_rate > 0:
        raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}")

    nyquist = sample_rate / 2.0
    if not 0 < bandpass_low < bandpass_high < nyquist:
        raise ConfigurationError(
            f"Bandpass must satisfy 0 < low < high < Nyquist: "
            f"low={bandpass_low}, high={bandpass_high}, nyquist={nyquist}"
        )

    # Normalized angular band edges
    w1 = 2 * math.pi * bandpass_low / sample_rate
    w2 = 2 * math.pi * bandpass_high / sample_rate

    w0 = math.sqrt(w1 * w2)
    bw = w2 - w1
    r = math.exp(-bw / 2)
    k = math.cos(w0)

    coefficients = FilterCoefficients(
        b=(1 - r, 0.0, -(1 - r)),
        a=(1.0, -2 * r * k, r * r),
    )

    logger.debug(
        f"Bandpass designed: {bandpass_low}-{bandpass_high} Hz @ {sample_rate} Hz "
        f"(r={r:.4f}, cos(w0)={k:.4f})"
    )
    return coefficients


def design_notch(
        sample_rate: float,
        notch_frequency: float,
        quality: float = 30.0
) -> Optional[FilterCoefficients]:
    """
    Design a powerline notch.

    Args:
        sample_rate: Sampling rate in Hz
        notch_frequency: Frequency to remove in Hz
        quality: Quality factor (centre frequency / -3 dB bandwidth)

    Returns:
        FilterCoefficients, or None when the notch is at or above Nyquist
        and so cannot be represented at this rate.

    Raises:
        ConfigurationError: on a non-positive sample rate, notch frequency or quality
    """
    if sample_rate is None or not sample_rate > 0:
        raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}")
    if notch_frequency is None or not notch_frequency > 0:
        raise ConfigurationError(f"Notch frequency must be positive, got {notch_frequency}")
    if not quality > 0:
        raise ConfigurationError(f"Notch quality must be positive, got {quality}")

    nyquist = sample_rate / 2.0
    if notch_frequency >= nyquist:
        logger.warning(
            f"Notch at {notch_frequency} Hz is not below Nyquist ({nyquist} Hz) - notch disabled"
        )
        return None

    b, a = signal.iirnotch(notch_frequency, quality, fs=sample_rate)

    return FilterCoefficients(
        b=(float(b[0]), float(b[1]), float(b[2])),
        a=(float(a[0]), float(a[1]), float(a[2])),
    )
