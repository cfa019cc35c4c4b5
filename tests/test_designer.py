"""Tests for bandpass and notch coefficient design."""
import math

import numpy as np
import pytest
from scipy import signal

from ppg_core import ConfigurationError, DSPConfig, StreamFilter
from ppg_core.dsp import design_bandpass, design_notch


class TestDesignBandpass:
    def test_coefficients_follow_resonator_formula(self):
        coefficients = design_bandpass(30, 0.5, 5.0)

        w1 = 2 * math.pi * 0.5 / 30
        w2 = 2 * math.pi * 5.0 / 30
        r = math.exp(-(w2 - w1) / 2)
        k = math.cos(math.sqrt(w1 * w2))

        assert coefficients.b == pytest.approx((1 - r, 0.0, -(1 - r)))
        assert coefficients.a == pytest.approx((1.0, -2 * r * k, r * r))

    def test_dc_gain_is_zero(self):
        assert design_bandpass(100, 0.5, 5.0).dc_gain == 0.0

    def test_poles_inside_unit_circle(self):
        coefficients = design_bandpass(100, 0.5, 5.0)
        poles = np.roots(coefficients.a)
        assert np.all(np.abs(poles) < 1.0)

    @pytest.mark.parametrize("sample_rate,low,high", [
        (30, 0.5, 5.0),
        (100, 0.5, 5.0),
        (60, 0.7, 3.5),
        (10, 0.1, 4.99),
        (250, 1.0, 124.0),
    ])
    def test_valid_configurations(self, sample_rate, low, high):
        design_bandpass(sample_rate, low, high)
        StreamFilter(sample_rate, DSPConfig(bandpass_low=low, bandpass_high=high))

    @pytest.mark.parametrize("sample_rate,low,high", [
        (30, 0.0, 5.0),     # low must be positive
        (30, -0.5, 5.0),
        (30, 5.0, 5.0),     # low must be below high
        (30, 6.0, 5.0),
        (30, 0.5, 15.0),    # high must be below Nyquist
        (30, 0.5, 20.0),
        (0, 0.5, 5.0),      # sample rate must be positive
        (-30, 0.5, 5.0),
        (30, float('nan'), 5.0),
    ])
    def test_invalid_configurations(self, sample_rate, low, high):
        with pytest.raises(ConfigurationError):
            design_bandpass(sample_rate, low, high)
        with pytest.raises(ConfigurationError):
            StreamFilter(sample_rate, DSPConfig(bandpass_low=low, bandpass_high=high))

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            design_bandpass(30, 0.5, 15.0)


class TestDesignNotch:
    def test_notch_removes_target_frequency(self):
        coefficients = design_notch(250, 50.0)
        assert coefficients is not None

        _, response = signal.freqz(coefficients.b, coefficients.a, worN=[50.0, 5.0], fs=250)
        assert abs(response[0]) < 1e-6
        assert abs(response[1]) > 0.99

    def test_notch_at_or_above_nyquist_is_disabled(self):
        assert design_notch(30, 60.0) is None
        assert design_notch(100, 50.0) is None

    @pytest.mark.parametrize("notch", [0.0, -50.0])
    def test_non_positive_notch_rejected(self, notch):
        with pytest.raises(ConfigurationError):
            design_notch(250, notch)
