import numpy as np
import pytest

from ecg_smt_pipeline.errors import DegenerateDataError
from ecg_smt_pipeline.median_filter import adaptive_median_filter, repeated_median_fit


def test_repeated_median_fit_on_exact_line():
    y = 3 + 2 * np.arange(12, dtype=float)
    level, slope, resid = repeated_median_fit(y)

    assert slope == pytest.approx(2.0)
    assert level == pytest.approx(y[-1])
    np.testing.assert_allclose(resid, 0, atol=1e-12)


def test_repeated_median_fit_ignores_a_spike():
    y = 3 + 2 * np.arange(15, dtype=float)
    y[7] += 500
    level, slope, _ = repeated_median_fit(y)

    assert slope == pytest.approx(2.0)
    assert level == pytest.approx(3 + 2 * 14)


def test_linear_trend_is_tracked_including_extrapolated_start():
    y = 10 + 0.5 * np.arange(100, dtype=float)
    result = adaptive_median_filter(y)

    assert result.n_samples == 100
    np.testing.assert_allclose(result.signals, y, atol=1e-9)
    assert np.all(result.widths[:9] == 0)
    assert np.all(result.widths[9:] >= 10)


def test_without_extrapolation_start_is_nan():
    y = np.arange(50, dtype=float)
    result = adaptive_median_filter(y, extrapolate=False)

    assert np.isnan(result.signals[:9]).all()
    assert np.isfinite(result.signals[9:]).all()


def test_isolated_spike_is_removed():
    y = np.full(80, 100.0)
    y[50] = 1000.0
    result = adaptive_median_filter(y)

    assert result.signals[50] == pytest.approx(100.0)
    assert result.signals[51] == pytest.approx(100.0)


def test_beat_width_excursion_is_tracked():
    # Alternating baseline with a six-sample plateau, like a saturated QRS
    y = 500 + np.where(np.arange(120) % 2 == 0, 3.0, -3.0)
    y[60:66] = 1000.0

    result = adaptive_median_filter(y)

    np.testing.assert_allclose(result.signals[64:66], 1000.0)
    assert result.signals[:60].max() <= 503.0
    np.testing.assert_allclose(result.signals[67:], 503.0)


def test_signal_stays_within_window_range():
    rng = np.random.default_rng(3)
    y = rng.normal(0, 1, 200).cumsum()
    y[80:86] += 40

    result = adaptive_median_filter(y)

    for t in range(9, len(y)):
        window = y[t - result.widths[t] + 1:t + 1]
        assert window.min() <= result.signals[t] <= window.max()


@pytest.mark.parametrize("width_search", ["linear", "geometric", "binary"])
def test_level_shift_is_followed(width_search):
    rng = np.random.default_rng(11)
    y = rng.normal(0, 1, 250)
    y[100:] += 100

    result = adaptive_median_filter(y, width_search=width_search)

    assert np.abs(result.signals[10:95]).max() < 5
    assert np.abs(result.signals[140:] - 100).max() < 5
    assert result.widths.max() <= 200


def test_window_grows_up_to_max_width():
    rng = np.random.default_rng(5)
    y = rng.normal(0, 1, 120)
    result = adaptive_median_filter(y, min_width=10, max_width=30)

    assert result.widths[9:].min() >= 10
    assert result.widths.max() <= 30


def test_filter_is_deterministic():
    rng = np.random.default_rng(2)
    y = rng.normal(0, 1, 150).cumsum()

    first = adaptive_median_filter(y)
    second = adaptive_median_filter(y)

    np.testing.assert_array_equal(first.signals, second.signals)
    np.testing.assert_array_equal(first.widths, second.widths)


def test_invalid_width_search():
    with pytest.raises(ValueError):
        adaptive_median_filter(np.arange(30, dtype=float), width_search="random")


def test_invalid_window_bounds():
    with pytest.raises(ValueError):
        adaptive_median_filter(np.arange(30, dtype=float), min_width=20, max_width=10)


def test_series_shorter_than_min_width():
    with pytest.raises(DegenerateDataError):
        adaptive_median_filter(np.arange(5, dtype=float))
