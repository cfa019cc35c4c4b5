"""Tests for the 20-value feature extractor."""
import numpy as np
import pytest

from ppg_core import FEATURE_COUNT, FEATURE_NAMES, extract_features


def feature(vector, name):
    return vector[FEATURE_NAMES.index(name)]


class TestFeatureLayout:
    def test_twenty_named_features_in_fixed_order(self):
        assert FEATURE_COUNT == 20
        assert FEATURE_NAMES[:10] == (
            'mean', 'variance', 'std', 'amplitude', 'max_rising_slope',
            'mean_peak_interval', 'peak_interval_std', 'peak_count', 'max', 'min',
        )
        assert FEATURE_NAMES[10:] == tuple(f'band_energy_{i}' for i in range(10))

    def test_returns_float64_vector(self, camera_ppg):
        vector = extract_features(camera_ppg[:300])
        assert isinstance(vector, np.ndarray)
        assert vector.shape == (20,)
        assert vector.dtype == np.float64


class TestInsufficientData:
    @pytest.mark.parametrize("length", [0, 1, 50, 99])
    def test_short_window_gives_zeros(self, length):
        vector = extract_features(np.full(length, 0.5))
        assert vector.shape == (20,)
        assert np.all(vector == 0.0)

    def test_exactly_100_samples_is_enough(self):
        assert extract_features(np.full(100, 0.5))[0] == 0.5


class TestFeatureValues:
    def test_constant_window_is_finite_and_degenerate(self):
        vector = extract_features(np.full(100, 0.5))

        assert np.all(np.isfinite(vector))
        assert feature(vector, 'mean') == 0.5
        assert feature(vector, 'variance') == 0.0
        assert feature(vector, 'std') == 0.0
        assert feature(vector, 'amplitude') == 0.0
        assert feature(vector, 'max_rising_slope') == 0.0
        assert feature(vector, 'mean_peak_interval') == 0.0
        assert feature(vector, 'peak_interval_std') == 0.0
        assert feature(vector, 'peak_count') == 0.0
        assert feature(vector, 'max') == 0.5
        assert feature(vector, 'min') == 0.5
        np.testing.assert_allclose(vector[10:], 0.25)

    def test_pulse_window(self, sine):
        window = sine(1.2, 30, 10, amplitude=0.1, offset=0.5, phase=0.3)
        vector = extract_features(window)

        assert feature(vector, 'mean') == pytest.approx(0.5, abs=0.01)
        assert feature(vector, 'variance') == pytest.approx(0.005, rel=0.1)
        assert feature(vector, 'std') == pytest.approx(np.sqrt(feature(vector, 'variance')))
        assert feature(vector, 'amplitude') == pytest.approx(0.2, abs=0.01)
        assert feature(vector, 'peak_count') == 12
        assert feature(vector, 'mean_peak_interval') == pytest.approx(25.0)
        assert feature(vector, 'peak_interval_std') == pytest.approx(0.0, abs=1e-9)
        assert feature(vector, 'max') == pytest.approx(0.6, abs=0.01)
        assert feature(vector, 'min') == pytest.approx(0.4, abs=0.01)

    def test_peak_intervals_and_spread(self):
        window = np.zeros(120)
        window[[10, 30, 60]] = 1.0
        vector = extract_features(window)

        assert feature(vector, 'peak_count') == 3
        assert feature(vector, 'mean_peak_interval') == pytest.approx(25.0)
        assert feature(vector, 'peak_interval_std') == pytest.approx(5.0)

    def test_single_peak_has_zero_interval_features(self):
        window = np.zeros(120)
        window[40] = 1.0
        vector = extract_features(window)

        assert feature(vector, 'peak_count') == 1
        assert feature(vector, 'mean_peak_interval') == 0.0
        assert feature(vector, 'peak_interval_std') == 0.0

    def test_max_rising_slope(self):
        window = np.zeros(100)
        window[20] = 0.3
        window[21] = 1.0
        assert feature(extract_features(window), 'max_rising_slope') == pytest.approx(0.7)

        falling = np.linspace(1.0, 0.0, 100)
        assert feature(extract_features(falling), 'max_rising_slope') == 0.0

    def test_band_energies_use_equal_segments(self):
        window = np.arange(105, dtype=float)
        vector = extract_features(window)

        expected = [np.mean(np.arange(10 * i, 10 * i + 10, dtype=float) ** 2) for i in range(10)]
        np.testing.assert_allclose(vector[10:], expected)

    def test_non_finite_samples_do_not_leak(self, sine):
        window = sine(1.2, 30, 10, amplitude=0.1, offset=0.5)
        window[[5, 50, 150]] = [np.nan, np.inf, -np.inf]

        assert np.all(np.isfinite(extract_features(window)))

    def test_accepts_plain_lists(self):
        vector = extract_features([0.5] * 150)
        assert feature(vector, 'mean') == 0.5

    def test_unconvertible_input_gives_zeros(self):
        assert np.all(extract_features("not a window") == 0.0)
