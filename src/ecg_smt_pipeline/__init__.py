# ECG-SMT Heart Rate Pipeline
# Packet decoding, two-method peak detection and heart-rate estimation

from .config import Config, default_config
from .errors import PipelineError, FormatError, DegenerateDataError
from .packets import decode, decode_packets, load_sample_signal, read_signal_file
from .series import TimeSeries, build_series
from .outliers import DetectionMethod, score_outliers, detect_peaks
from .median_filter import adaptive_median_filter
from .detectors import DetectionResult, detect_loess_peaks, detect_adaptive_peaks
from .heart_rate import estimate_heart_rate, round_half_up
from .pipeline import PipelineResult, minimum_series_length, run_pipeline

__all__ = [
    "Config",
    "default_config",
    "PipelineError",
    "FormatError",
    "DegenerateDataError",
    "decode",
    "decode_packets",
    "load_sample_signal",
    "read_signal_file",
    "TimeSeries",
    "build_series",
    "DetectionMethod",
    "score_outliers",
    "detect_peaks",
    "adaptive_median_filter",
    "DetectionResult",
    "detect_loess_peaks",
    "detect_adaptive_peaks",
    "estimate_heart_rate",
    "round_half_up",
    "PipelineResult",
    "run_pipeline",
    "minimum_series_length",
]
