"""
Adaptive online repeated median filter.

Robust online smoother: at each time point a repeated median (RM) regression
line is fitted to a trailing window and evaluated at the window's right end.
The window width adapts to the data. A sign test on the most recent
residuals shrinks the window when the line no longer describes the latest
observations (level shifts, trend changes, QRS complexes); otherwise the
window grows by one sample per step up to a maximum width. The level is
restricted to the range of the observations in the window, so the RM line
cannot overshoot a steep excursion.

Excursions that last at least `p_test` samples are tracked. Isolated spikes
do not trigger adaptation and are removed from the signal.
"""

from typing import Tuple
from dataclasses import dataclass

import numpy as np
from scipy import stats

from .config import Config, default_config
from .errors import DegenerateDataError

WIDTH_SEARCHES = ("linear", "geometric", "binary")


@dataclass
class AdaptiveFilterResult:
    """Result of adaptive repeated median filtering."""
    signals: np.ndarray  # Filtered level at each time point
    slopes: np.ndarray   # RM slope at each time point (per sample)
    widths: np.ndarray   # Window width used at each time point (0 = extrapolated)

    @property
    def n_samples(self) -> int:
        return len(self.signals)


def repeated_median_fit(window: np.ndarray) -> Tuple[float, float, np.ndarray]:
    """
    Fit a repeated median regression line to a window.

    Positions are relative to the window's last sample (0 at the end), so
    the returned level is the line evaluated at the newest observation.

    Returns
    -------
    Tuple[float, float, np.ndarray]
        (level, slope, residuals)
    """
    y = np.asarray(window, dtype=np.float64)
    w = len(y)
    x = np.arange(-(w - 1), 1, dtype=np.float64)

    if w == 1:
        return float(y[0]), 0.0, np.zeros(1)

    off_diagonal = ~np.eye(w, dtype=bool)
    dy = (y[None, :] - y[:, None])[off_diagonal].reshape(w, w - 1)
    dx = (x[None, :] - x[:, None])[off_diagonal].reshape(w, w - 1)

    slope = float(np.median(np.median(dy / dx, axis=1)))
    level = float(np.median(y - slope * x))
    residuals = y - (level + slope * x)
    return level, slope, residuals


def _sign_test_rejects(residuals: np.ndarray, p_test: int, test_level: float) -> bool:
    recent = residuals[-min(p_test, len(residuals)):]
    signs = np.sign(recent)
    n_nonzero = int(np.count_nonzero(signs))
    if n_nonzero == 0:
        return False
    n_positive = int(np.sum(signs > 0))
    p_value = stats.binomtest(n_positive, n_nonzero, 0.5).pvalue
    return p_value < 1.0 - test_level


def _fit_adapted(
    y: np.ndarray,
    t: int,
    width: int,
    min_width: int,
    p_test: int,
    test_level: float,
    width_search: str,
    shrink: float,
) -> Tuple[float, float, int]:
    def fit(w: int):
        return repeated_median_fit(y[t - w + 1:t + 1])

    level, slope, resid = fit(width)
    if width <= min_width or not _sign_test_rejects(resid, p_test, test_level):
        return level, slope, width

    if width_search == "linear":
        while width > min_width:
            width -= 1
            level, slope, resid = fit(width)
            if not _sign_test_rejects(resid, p_test, test_level):
                break
        return level, slope, width

    if width_search == "geometric":
        while width > min_width:
            width = max(min_width, int(width * shrink))
            level, slope, resid = fit(width)
            if not _sign_test_rejects(resid, p_test, test_level):
                break
        return level, slope, width

    # binary: largest accepted width below the rejected one
    lo, hi = min_width, width - 1
    while lo < hi:
        mid = (lo + hi + 1) // 2
        _, _, mid_resid = fit(mid)
        if _sign_test_rejects(mid_resid, p_test, test_level):
            hi = mid - 1
        else:
            lo = mid
    level, slope, _ = fit(lo)
    return level, slope, lo


def adaptive_median_filter(
    values,
    min_width: int = None,
    max_width: int = None,
    p_test: int = None,
    test_level: float = None,
    width_search: str = None,
    extrapolate: bool = None,
    shrink: float = 0.5,
    config: Config = default_config,
) -> AdaptiveFilterResult:
    """
    Apply the adaptive online repeated median filter to a series.

    Parameters
    ----------
    values : array-like
        Input series.
    min_width, max_width : int, optional
        Window width bounds. Default to config.FILTER_MIN_WIDTH / FILTER_MAX_WIDTH.
    p_test : int, optional
        Number of most recent residuals used by the sign test.
    test_level : float, optional
        Confidence level of the sign test (window shrinks when the
        two-sided p-value is below ``1 - test_level``).
    width_search : str, optional
        "linear" (one sample at a time), "geometric" (multiply by
        ``shrink``) or "binary" (bisect for the largest accepted width).
    extrapolate : bool, optional
        Fill the first ``min_width - 1`` points from the first fitted line
        instead of leaving them NaN.
    shrink : float
        Width factor for the geometric search.
    config : Config
        Pipeline configuration.

    Returns
    -------
    AdaptiveFilterResult
        Filtered signal with the same length as the input.
    """
    if min_width is None:
        min_width = config.FILTER_MIN_WIDTH
    if max_width is None:
        max_width = config.FILTER_MAX_WIDTH
    if p_test is None:
        p_test = config.FILTER_P_TEST
    if test_level is None:
        test_level = config.FILTER_TEST_LEVEL
    if width_search is None:
        width_search = config.FILTER_WIDTH_SEARCH
    if extrapolate is None:
        extrapolate = config.FILTER_EXTRAPOLATE

    if width_search not in WIDTH_SEARCHES:
        raise ValueError(f"width_search must be one of {WIDTH_SEARCHES}, got '{width_search}'")
    if min_width < 3 or max_width < min_width:
        raise ValueError(f"Invalid window bounds: min_width={min_width}, max_width={max_width}")
    if not 0 < shrink < 1:
        raise ValueError(f"shrink must be in (0, 1), got {shrink}")

    y = np.asarray(values, dtype=np.float64)
    n = len(y)
    if n < min_width:
        raise DegenerateDataError(f"Series of {n} samples is shorter than min_width={min_width}")
    if not np.all(np.isfinite(y)):
        raise DegenerateDataError("Series contains non-finite values")

    signals = np.full(n, np.nan)
    slopes = np.full(n, np.nan)
    widths = np.zeros(n, dtype=np.int64)

    width = min_width
    for t in range(min_width - 1, n):
        width = min(width, t + 1)
        level, slope, width = _fit_adapted(
            y, t, width, min_width, p_test, test_level, width_search, shrink,
        )
        window = y[t - width + 1:t + 1]
        signals[t] = min(max(level, window.min()), window.max())
        slopes[t] = slope
        widths[t] = width
        width = min(width + 1, max_width)

    if extrapolate and min_width > 1:
        t0 = min_width - 1
        steps = np.arange(t0, dtype=np.float64) - t0
        signals[:t0] = signals[t0] + slopes[t0] * steps
        slopes[:t0] = slopes[t0]

    return AdaptiveFilterResult(signals=signals, slopes=slopes, widths=widths)
