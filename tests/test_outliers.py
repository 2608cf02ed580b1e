import numpy as np
import pytest

from conftest import synthetic_ecg
from ecg_smt_pipeline.config import Config
from ecg_smt_pipeline.errors import DegenerateDataError
from ecg_smt_pipeline.outliers import (
    DetectionMethod,
    detect_peaks,
    detrend_residuals,
    periodic_remainder,
    score_outliers,
)
from ecg_smt_pipeline.series import build_series


def test_single_local_maximum():
    assert detect_peaks([1, 2, 3, 2, 1]).tolist() == [3]


def test_several_maxima_are_one_based():
    assert detect_peaks([0, 1, 0, 1, 0]).tolist() == [2, 4]


@pytest.mark.parametrize("values", [[1, 2, 3, 4, 5], [5, 4, 3, 2, 1], [1, 2, 2, 1], [0, 0, 0], [1, 2]])
def test_no_strict_sign_change_means_no_peak(values):
    assert detect_peaks(values).size == 0


def test_isolated_score_spikes_are_peaks():
    scores = np.zeros(20)
    scores[[4, 12]] = [2.5, 0.7]
    assert detect_peaks(scores).tolist() == [5, 13]


def test_method_quantile_bands():
    assert DetectionMethod.LOESS.quantiles() == (0.25, 0.75)
    assert DetectionMethod.ADAPTIVE_MEDIAN.quantiles() == (0.15, 0.85)

    config = Config(LOESS_QUANTILES=(0.2, 0.8))
    assert DetectionMethod.LOESS.quantiles(config) == (0.2, 0.8)


def test_constant_series_is_degenerate():
    flat = build_series(np.full(50, 512.0))

    np.testing.assert_allclose(detrend_residuals(flat.values), 0, atol=1e-8)
    with pytest.raises(DegenerateDataError):
        score_outliers(flat, DetectionMethod.LOESS)


def test_too_short_series_is_degenerate():
    with pytest.raises(DegenerateDataError):
        score_outliers(np.array([1.0, 2.0]), DetectionMethod.LOESS)


def test_non_finite_values_are_rejected():
    values = synthetic_ecg(100, period=50)
    values[10] = np.nan
    with pytest.raises(DegenerateDataError):
        score_outliers(values, DetectionMethod.ADAPTIVE_MEDIAN)


def test_scores_flag_beats_only():
    values = synthetic_ecg(600, period=150)
    scores = score_outliers(build_series(values), DetectionMethod.LOESS)

    assert scores.shape == values.shape
    assert np.all(scores >= 0)
    assert np.isfinite(scores).all()
    # Most samples lie within the fences
    assert np.mean(scores == 0) > 0.9

    beats = np.arange(75, 600, 150)
    assert np.all(scores[beats] > 10)

    peaks = detect_peaks(scores)
    for beat in beats:
        assert beat + 1 in peaks


def test_wider_band_on_same_residuals_scores_less():
    values = synthetic_ecg(300, period=100)
    loess_scores = score_outliers(values, DetectionMethod.LOESS)
    adaptive_scores = score_outliers(values, DetectionMethod.ADAPTIVE_MEDIAN)

    beats = np.arange(50, 300, 100)
    assert np.all(adaptive_scores[beats] < loess_scores[beats])


def test_periodic_series_uses_seasonal_remainder():
    rng = np.random.default_rng(3)
    n, period = 400, 50
    t = np.arange(n)
    values = 10 * np.sin(2 * np.pi * t / period) + rng.normal(0, 0.5, n)
    values[200] += 40

    scores = score_outliers(values, DetectionMethod.LOESS, period=period)

    assert scores.shape == (n,)
    assert int(np.argmax(scores)) == 200
    assert scores[200] > 0
    # Same phase one period away: the spike is not folded into the season
    resid = detrend_residuals(values, period=period)
    assert abs(resid[150]) < 5
    assert abs(resid[250]) < 5


def test_periodic_remainder_removes_the_season():
    n, period = 300, 30
    t = np.arange(n)
    values = 0.02 * t + 5 * np.sin(2 * np.pi * t / period)
    values[100] += 25

    resid = periodic_remainder(values, period)

    assert resid[100] > 20
    assert np.abs(np.delete(resid, np.arange(90, 111))).max() < 1.0


def test_periodic_series_shorter_than_two_periods():
    with pytest.raises(DegenerateDataError):
        score_outliers(np.arange(60, dtype=float), DetectionMethod.LOESS, period=40)
