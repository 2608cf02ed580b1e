"""
I/O utilities for the ECG-SMT pipeline.

Handles:
- Heart-rate summary JSON save/load
- Per-sample series table export (CSV)
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, asdict, fields

import pandas as pd

from .pipeline import PipelineResult


@dataclass
class HeartRateSummary:
    """Container for per-method peak detection and heart-rate results."""
    n_packets: int                  # Packets in the raw stream
    n_samples: int                  # Decoded samples
    fs: int                         # Sampling rate
    heart_rate: int                 # Primary heart rate (adaptive median filter)
    heart_rate_loess: int           # Secondary heart rate (LOESS)
    n_peaks_adaptive: int
    n_peaks_loess: int
    peaks_adaptive: List[int]       # 1-based positions
    peaks_loess: List[int]          # 1-based positions
    processed_at: str               # ISO timestamp
    skipped_packets: List[int]      # Packets failing the layout pattern
    source: Optional[str] = None    # Input file, if any

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeartRateSummary":
        """Create a summary from a dictionary, ignoring unknown keys."""
        allowed = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in allowed}
        return cls(**filtered)

    @classmethod
    def from_result(cls, result: PipelineResult, source: Optional[str] = None) -> "HeartRateSummary":
        """Summarize a pipeline run."""
        return cls(
            n_packets=result.decode.n_packets,
            n_samples=len(result.series),
            fs=result.sampling_rate,
            heart_rate=int(result.adaptive.heart_rate),
            heart_rate_loess=int(result.loess.heart_rate),
            n_peaks_adaptive=result.adaptive.n_peaks,
            n_peaks_loess=result.loess.n_peaks,
            peaks_adaptive=[int(p) for p in result.adaptive.peaks],
            peaks_loess=[int(p) for p in result.loess.peaks],
            processed_at=datetime.now().isoformat(),
            skipped_packets=list(result.decode.skipped_packets),
            source=source,
        )


def save_summary_json(summary: HeartRateSummary, output_path: Path) -> None:
    """
    Save a heart-rate summary to a JSON file.

    Parameters
    ----------
    summary : HeartRateSummary
        Summary of a pipeline run.
    output_path : Path
        Path for output JSON file.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(summary.to_dict(), f, indent=2, ensure_ascii=False)


def load_summary_json(json_path: Path) -> HeartRateSummary:
    """
    Load a heart-rate summary from a JSON file.

    Raises
    ------
    FileNotFoundError
        If JSON file does not exist.
    """
    if not json_path.exists():
        raise FileNotFoundError(f"Summary file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return HeartRateSummary.from_dict(data)


def series_table(result: PipelineResult) -> pd.DataFrame:
    """Per-sample table of raw values, smoothed curves and outlier scores."""
    return result.series.to_frame().assign(
        loess_fit=result.loess.curve,
        loess_score=result.loess.scores,
        filtered=result.adaptive.curve,
        filtered_score=result.adaptive.scores,
    )


def save_series_csv(result: PipelineResult, output_path: Path) -> None:
    """Write the per-sample table to CSV."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    series_table(result).to_csv(output_path, index=False)
