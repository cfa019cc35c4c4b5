"""Tests for windowed batch estimation with an injected scorer."""
import numpy as np
import pytest

from ppg_core import (
    ConfigurationError,
    DSPConfig,
    Sample,
    WindowedEstimationPipeline,
    extract_features,
    filter_signal,
    make_samples,
    run_windowed_estimation,
)


def mean_scorer(features):
    return float(features[0])


class TestWindowing:
    @pytest.mark.parametrize("count,expected", [
        (0, 0),
        (299, 0),
        (300, 1),
        (449, 1),
        (450, 2),
        (899, 4),
        (900, 5),
        (1000, 5),
    ])
    def test_window_count(self, count, expected):
        samples = make_samples(np.full(count, 0.5), 30)
        result = run_windowed_estimation(samples, mean_scorer)

        assert len(result) == expected
        assert result.window_count == expected
        assert WindowedEstimationPipeline(mean_scorer).expected_windows(count) == expected

    def test_windows_are_ordered_with_provenance(self, camera_ppg):
        samples = make_samples(camera_ppg, 30, start_timestamp=1_700_000_000_000)
        result = WindowedEstimationPipeline(mean_scorer).run(samples)

        assert [w.window_index for w in result] == [0, 1, 2, 3, 4]
        for window in result:
            assert window.start_index == window.window_index * 150
            assert window.end_index == window.start_index + 299
            assert window.end_timestamp == samples[window.end_index].timestamp

        end_timestamps = [w.end_timestamp for w in result]
        assert end_timestamps == sorted(end_timestamps)

    def test_scorer_sees_features_of_raw_window(self, camera_ppg):
        seen = []

        def scorer(features):
            seen.append(features)
            return len(seen)

        result = WindowedEstimationPipeline(scorer, window_size=300, stride=150).run(camera_ppg)

        assert [w.estimate for w in result] == [1, 2, 3, 4, 5]
        for i, features in enumerate(seen):
            assert features.shape == (20,)
            np.testing.assert_array_equal(features, extract_features(camera_ppg[i * 150:i * 150 + 300]))
            np.testing.assert_array_equal(result[i].features, features)

    def test_custom_window_and_stride(self):
        result = run_windowed_estimation(np.zeros(1000), mean_scorer, window_size=200, stride=100)
        assert len(result) == 9
        assert result[-1].end_index == 999

    def test_bare_values_have_no_timestamp(self):
        result = run_windowed_estimation(np.full(300, 0.5), mean_scorer)
        assert result[0].end_timestamp is None
        assert result[0].estimate == 0.5

    def test_filtered_windows(self, camera_ppg):
        config = DSPConfig()
        pipeline = WindowedEstimationPipeline(mean_scorer, sample_rate=30, filter_config=config)
        result = pipeline.run(make_samples(camera_ppg, 30))

        filtered = filter_signal(camera_ppg, 30, config)
        np.testing.assert_array_equal(result[0].features, extract_features(filtered[:300]))

    def test_simulated_samples_are_counted(self):
        samples = [
            Sample(timestamp=i * 33, value=0.5, simulated=(100 <= i < 110))
            for i in range(450)
        ]
        result = run_windowed_estimation(samples, mean_scorer)

        assert [w.simulated_count for w in result] == [10, 0]


class TestScorerFailures:
    def test_failure_is_isolated_to_its_window(self, camera_ppg):
        def flaky(features):
            flaky.calls += 1
            if flaky.calls == 2:
                raise RuntimeError("model unavailable")
            return flaky.calls
        flaky.calls = 0

        samples = make_samples(camera_ppg, 30)
        result = WindowedEstimationPipeline(flaky).run(samples)

        assert [w.window_index for w in result] == [0, 2, 3, 4]
        assert not result.ok
        assert len(result.failures) == 1

        failure = result.failures[0]
        assert failure.window_index == 1
        assert failure.end_index == 449
        assert failure.end_timestamp == samples[449].timestamp
        assert isinstance(failure.error, RuntimeError)
        assert result.window_count == 5

    def test_every_window_failing_still_completes(self):
        def broken(features):
            raise ValueError("bad vector")

        result = run_windowed_estimation(np.zeros(600), broken)
        assert len(result) == 0
        assert len(result.failures) == 3


class TestPipelineConfiguration:
    @pytest.mark.parametrize("kwargs", [
        {'window_size': 0},
        {'stride': 0},
        {'window_size': -5},
        {'filter_config': DSPConfig()},
        {'filter_config': DSPConfig(bandpass_high=20.0), 'sample_rate': 30},
    ])
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ConfigurationError):
            WindowedEstimationPipeline(mean_scorer, **kwargs)

    def test_scorer_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            WindowedEstimationPipeline("not callable")
