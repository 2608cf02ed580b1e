"""
Residual outlier scoring and score-peak extraction.

Provides:
- Detrending by LOESS residuals (or a robust periodic seasonal remainder)
- Tukey-fence outlier scores with method-specific quantile bands
- Peak positions of the resulting score curve
"""

from enum import Enum
from typing import Optional, Tuple, Union

import numpy as np

from .config import Config, default_config
from .errors import DegenerateDataError
from .loess import loess_smooth
from .series import TimeSeries


class DetectionMethod(Enum):
    """Peak detection strategy and its residual quantile band."""
    LOESS = "loess"
    ADAPTIVE_MEDIAN = "adaptive_median"

    def quantiles(self, config: Config = default_config) -> Tuple[float, float]:
        """Return the (low, high) residual quantiles used for this method."""
        if self is DetectionMethod.LOESS:
            return config.LOESS_QUANTILES
        return config.ADAPTIVE_QUANTILES

    @property
    def label(self) -> str:
        if self is DetectionMethod.LOESS:
            return "LOESS smoothing"
        return "Adaptive online repeated median filter"


def periodic_remainder(
    values: np.ndarray,
    period: int,
    iterations: int = 2,
) -> np.ndarray:
    """
    Remainder of a robust seasonal-trend decomposition with a periodic season.

    The seasonal component is one value per phase: the median of the
    detrended samples in that cycle-subseries, centered to zero mean. The
    trend is a local linear LOESS of the deseasonalized series over about
    1.5 periods. A single outlying sample therefore stays in the remainder.

    Raises
    ------
    DegenerateDataError
        If the series covers fewer than two full periods.
    """
    x = np.asarray(values, dtype=np.float64)
    n = len(x)
    period = int(period)
    if n < 2 * period:
        raise DegenerateDataError(
            f"Need at least two periods ({2 * period} samples) for seasonal detrending, got {n}"
        )

    trend_window = int(np.ceil(1.5 * period))
    trend_window += 1 - trend_window % 2  # odd window
    trend_span = trend_window / n

    phases = np.arange(n) % period
    seasonal = np.zeros(n)
    trend = loess_smooth(x, span=trend_span, degree=1)
    for _ in range(iterations):
        detrended = x - trend
        cycle = np.array([np.median(detrended[phases == k]) for k in range(period)])
        seasonal = (cycle - cycle.mean())[phases]
        trend = loess_smooth(x - seasonal, span=trend_span, degree=1)

    return x - seasonal - trend


def detrend_residuals(
    values: np.ndarray,
    period: Optional[int] = None,
    config: Config = default_config,
) -> np.ndarray:
    """
    Remove the local trend from a series.

    Periodic series (``period > 1``) use the remainder of a robust seasonal
    decomposition (see ``periodic_remainder``). Other series use the
    residuals of a LOESS fit against the sample positions.
    """
    x = np.asarray(values, dtype=np.float64)

    if period is not None and period > 1:
        return periodic_remainder(x, period)

    return x - loess_smooth(x, span=config.SCORER_LOESS_SPAN, degree=config.LOESS_DEGREE)


def score_outliers(
    series: Union[TimeSeries, np.ndarray],
    method: DetectionMethod,
    period: Optional[int] = None,
    config: Config = default_config,
) -> np.ndarray:
    """
    Score how far each detrended sample falls outside the Tukey fences.

    Parameters
    ----------
    series : TimeSeries or np.ndarray
        Series to score.
    method : DetectionMethod
        Selects the residual quantile band.
    period : int, optional
        Seasonal period; only values > 1 switch to seasonal detrending.
    config : Config
        Pipeline configuration.

    Returns
    -------
    np.ndarray
        One non-negative score per sample; 0 for residuals inside the fences.

    Raises
    ------
    DegenerateDataError
        If the series is too short to detrend or the residual IQR is zero.
    """
    values = series.values if isinstance(series, TimeSeries) else np.asarray(series, dtype=np.float64)

    if len(values) < 3:
        raise DegenerateDataError(f"Need at least 3 samples for outlier scoring, got {len(values)}")
    if not np.all(np.isfinite(values)):
        raise DegenerateDataError("Series contains non-finite values")

    resid = detrend_residuals(values, period=period, config=config)

    q_low, q_high = np.quantile(resid, method.quantiles(config))
    iqr = q_high - q_low
    scale = max(1.0, float(np.max(np.abs(values))))
    if not np.isfinite(iqr) or iqr <= config.IQR_TOLERANCE * scale:
        raise DegenerateDataError(
            f"Residual IQR is {iqr} for method '{method.value}'; cannot scale outlier scores"
        )

    lower = q_low - config.TUKEY_MULTIPLIER * iqr
    upper = q_high + config.TUKEY_MULTIPLIER * iqr

    score = np.abs(
        np.minimum((resid - lower) / iqr, 0.0) + np.maximum((resid - upper) / iqr, 0.0)
    )
    return score


def detect_peaks(values) -> np.ndarray:
    """
    Return 1-based positions of strict local maxima.

    A position is a peak when the sign of the first difference goes from
    +1 to -1 there. Plateaus and flat runs do not qualify.
    """
    x = np.asarray(values, dtype=np.float64)
    if x.size < 3:
        return np.array([], dtype=np.int64)
    second = np.diff(np.sign(np.diff(x)))
    return (np.where(second == -2)[0] + 2).astype(np.int64)
