"""End-to-end heart-rate pipeline: decode, build series, detect, estimate."""

from typing import Optional
from dataclasses import dataclass

import numpy as np

from .config import Config, default_config
from .detectors import DetectionResult, detect_loess_peaks, detect_adaptive_peaks
from .errors import DegenerateDataError
from .packets import DecodeResult, decode_packets, load_sample_signal
from .series import TimeSeries, build_series


@dataclass
class PipelineResult:
    """Series and per-method detection results of one pipeline run."""
    decode: DecodeResult
    series: TimeSeries
    loess: DetectionResult
    adaptive: DetectionResult
    sampling_rate: int

    @property
    def heart_rate(self) -> int:
        """Primary heart rate (adaptive median filter)."""
        return self.adaptive.heart_rate

    @property
    def duration_seconds(self) -> float:
        """Recording length in seconds."""
        return len(self.series) / self.sampling_rate


def minimum_series_length(config: Config = default_config) -> int:
    """Smallest series both detectors can fit (LOESS neighborhood, filter window)."""
    span = min(config.LOESS_SPAN, config.SCORER_LOESS_SPAN, 1.0)
    n = config.LOESS_DEGREE + 1
    while np.floor(n * span) < config.LOESS_DEGREE + 1:
        n += 1
    return max(n, config.FILTER_MIN_WIDTH)


def run_pipeline(
    raw: Optional[str] = None,
    config: Config = default_config,
) -> PipelineResult:
    """
    Run the full pipeline on a raw hex packet stream.

    Parameters
    ----------
    raw : str, optional
        Concatenated packets. Defaults to the embedded sample recording.
    config : Config
        Pipeline configuration.

    Returns
    -------
    PipelineResult
        Both detection results; the caller decides which heart rate to show.

    Raises
    ------
    FormatError
        If the stream is not a whole number of packets.
    DegenerateDataError
        If no packet decodes, or the series is too short to fit.
    """
    if raw is None:
        raw = load_sample_signal()

    decoded = decode_packets(raw, config)
    if decoded.n_measurements == 0:
        raise DegenerateDataError(
            f"No valid packets in stream ({len(decoded.skipped_packets)} skipped)"
        )
    min_length = minimum_series_length(config)
    if decoded.n_measurements < min_length:
        raise DegenerateDataError(
            f"Series of {decoded.n_measurements} samples is too short; need at least {min_length}"
        )

    series = build_series(decoded.values)

    loess_result = detect_loess_peaks(series, config)
    adaptive_result = detect_adaptive_peaks(series, config)

    return PipelineResult(
        decode=decoded,
        series=series,
        loess=loess_result,
        adaptive=adaptive_result,
        sampling_rate=config.SAMPLING_RATE,
    )
