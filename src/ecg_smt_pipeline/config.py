"""ecg_smt_pipeline configuration.

Centralizes configurable parameters for packet decoding, LOESS smoothing,
adaptive median filtering, outlier scoring and heart-rate estimation.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Tuple


@dataclass
class Config:
    """Pipeline configuration parameters."""

    # ==========================================================================
    # Signal Acquisition Parameters
    # ==========================================================================
    SAMPLING_RATE: int = 256  # Hz (Olimex ECG-SMT)

    # ==========================================================================
    # Packet Layout (hex characters, 2 per byte)
    # ==========================================================================
    PACKET_HEX_LENGTH: int = 34   # 17 bytes per packet
    CHANNEL_FIELD_OFFSET: int = 8  # bytes 0-3: header + sequence
    CHANNEL_FIELD_WIDTH: int = 4   # bytes 4-5: channel 1, big-endian uint16

    # ==========================================================================
    # LOESS Parameters
    # ==========================================================================
    LOESS_SPAN: float = 0.15         # Peak detector smoothing span
    SCORER_LOESS_SPAN: float = 0.75  # Detrending span used by the outlier scorer
    LOESS_DEGREE: int = 2

    # Score the fitted LOESS curve instead of the raw series
    # (reproduces the historical R script)
    LOESS_SCORE_FITTED: bool = False

    # ==========================================================================
    # Outlier Scoring Parameters
    # ==========================================================================
    TUKEY_MULTIPLIER: float = 1.5
    # IQR at or below this fraction of the series scale counts as zero
    IQR_TOLERANCE: float = 1e-9
    LOESS_QUANTILES: Tuple[float, float] = (0.25, 0.75)
    ADAPTIVE_QUANTILES: Tuple[float, float] = (0.15, 0.85)

    # ==========================================================================
    # Adaptive Online Repeated Median Filter
    # ==========================================================================
    FILTER_MIN_WIDTH: int = 10
    FILTER_MAX_WIDTH: int = 200
    FILTER_P_TEST: int = 5         # Most recent residuals used by the sign test
    FILTER_TEST_LEVEL: float = 0.9
    FILTER_WIDTH_SEARCH: str = "linear"  # "linear", "geometric" or "binary"
    FILTER_EXTRAPOLATE: bool = True

    # ==========================================================================
    # Directory Structure / Output File Naming
    # ==========================================================================
    RESULTS_DIR: str = "Results"
    PLOT_FILE: str = "ecg_plots.png"
    REPORT_FILE: str = "ecg_report.html"
    SUMMARY_FILE: str = "heart_rate_summary.json"
    SERIES_FILE: str = "ecg_series.csv"

    # ==========================================================================
    # Visualization Parameters
    # ==========================================================================
    PLOT_WIDTH_PX: int = 700
    PLOT_HEIGHT_PX: int = 200
    PLOT_DPI: int = 100

    @property
    def PLOT_SIZE_INCHES(self) -> Tuple[float, float]:
        """Return the figure size for the comparison plot."""
        return (self.PLOT_WIDTH_PX / self.PLOT_DPI, self.PLOT_HEIGHT_PX / self.PLOT_DPI)

    def get_project_root(self) -> Path:
        """Get project root directory."""
        return Path(__file__).parent.parent.parent

    def get_results_dir(self) -> Path:
        """Get results directory path."""
        return self.get_project_root() / self.RESULTS_DIR

    def get_output_path(self, output_dir: Path, file_name: str) -> Path:
        """Get path for an output file, creating the directory if needed."""
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir / file_name


# Default configuration instance
default_config = Config()
