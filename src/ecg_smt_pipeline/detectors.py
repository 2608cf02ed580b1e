"""
Peak detection on the channel-1 series.

Two independent strategies share the outlier scorer:
- LOESS: local regression with a small span, raw series scored
- Adaptive median: adaptive online repeated median filter, filtered
  series scored with a wider quantile band
"""

from typing import List
from dataclasses import dataclass, field

import numpy as np

from .config import Config, default_config
from .heart_rate import estimate_heart_rate
from .loess import LoessFit
from .median_filter import adaptive_median_filter, AdaptiveFilterResult
from .outliers import DetectionMethod, score_outliers, detect_peaks
from .series import TimeSeries, build_series


@dataclass
class DetectionResult:
    """Result of one peak detection strategy."""
    method: DetectionMethod
    peaks: np.ndarray      # 1-based positions of score peaks
    scores: np.ndarray     # Outlier score per sample
    curve: np.ndarray      # Smoothed series (LOESS fit or filtered signal)
    heart_rate: int        # Beats per minute
    notes: List[str] = field(default_factory=list)

    @property
    def n_peaks(self) -> int:
        """Number of detected peaks."""
        return len(self.peaks)


def fit_loess_curve(series: TimeSeries, config: Config = default_config) -> np.ndarray:
    """
    Fit the detector LOESS curve and predict it one sample position at a time.
    """
    fit = LoessFit(series.index, series.values, span=config.LOESS_SPAN, degree=config.LOESS_DEGREE)
    curve = []
    for position in series.index:
        curve.append(fit.predict_one(position))
    return np.asarray(curve, dtype=np.float64)


def detect_loess_peaks(
    series: TimeSeries,
    config: Config = default_config,
) -> DetectionResult:
    """
    Detect peaks with the LOESS strategy.

    The outlier scorer detrends with its own LOESS fit, so the detector's
    curve and the scorer's fit are computed independently.

    Parameters
    ----------
    series : TimeSeries
        Channel-1 series.
    config : Config
        Pipeline configuration. ``LOESS_SCORE_FITTED`` scores the fitted
        curve instead of the raw series.

    Returns
    -------
    DetectionResult
        Peaks, scores, fitted curve and heart rate (against the series length).
    """
    curve = fit_loess_curve(series, config)

    notes: List[str] = []
    if config.LOESS_SCORE_FITTED:
        target = build_series(curve)
        notes.append("Scored the fitted LOESS curve")
    else:
        target = series

    scores = score_outliers(target, DetectionMethod.LOESS, config=config)
    peaks = detect_peaks(scores)

    return DetectionResult(
        method=DetectionMethod.LOESS,
        peaks=peaks,
        scores=scores,
        curve=curve,
        heart_rate=estimate_heart_rate(len(peaks), len(series), config.SAMPLING_RATE),
        notes=notes,
    )


def detect_adaptive_peaks(
    series: TimeSeries,
    config: Config = default_config,
) -> DetectionResult:
    """
    Detect peaks with the adaptive online repeated median filter strategy.

    Returns
    -------
    DetectionResult
        Peaks, scores, filtered series and heart rate (against the
        filtered series length).
    """
    filtered: AdaptiveFilterResult = adaptive_median_filter(series.values, config=config)
    filtered_series = build_series(filtered.signals)

    scores = score_outliers(filtered_series, DetectionMethod.ADAPTIVE_MEDIAN, config=config)
    peaks = detect_peaks(scores)

    fitted_widths = filtered.widths[filtered.widths > 0]
    notes = [
        f"Window width {int(fitted_widths.min())}-{int(fitted_widths.max())} "
        f"({config.FILTER_WIDTH_SEARCH} search)"
    ]

    return DetectionResult(
        method=DetectionMethod.ADAPTIVE_MEDIAN,
        peaks=peaks,
        scores=scores,
        curve=filtered_series.values,
        heart_rate=estimate_heart_rate(len(peaks), len(filtered_series), config.SAMPLING_RATE),
        notes=notes,
    )
