"""
Comparison plots of the two peak detection strategies.

Provides:
- Static two-panel PNG (matplotlib) titled with the heart rate
- Interactive HTML report (Plotly) with outlier scores and peak markers
"""

from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .config import Config, default_config
from .pipeline import PipelineResult

COLOR_POINTS = "grey"
COLOR_CURVE = "#CD0000"  # red3
COLOR_PEAKS = "rgb(255, 0, 0)"


def render_comparison_png(
    result: PipelineResult,
    output_path: Path,
    config: Config = default_config,
) -> Path:
    """
    Render the LOESS and adaptive-filter panels side by side to a PNG.

    The figure title carries the adaptive-filter heart rate.
    """
    index = result.series.index
    filtered = result.adaptive.curve

    fig, axes = plt.subplots(1, 2, figsize=config.PLOT_SIZE_INCHES, dpi=config.PLOT_DPI)
    ax_loess, ax_filter = axes

    ax_loess.scatter(index, result.series.values, s=6, facecolors="none", edgecolors=COLOR_POINTS, linewidths=0.5)
    ax_loess.plot(index, result.loess.curve, color=COLOR_CURVE, linewidth=1.1)
    ax_loess.set_title(result.loess.method.label, fontsize=10, fontweight="bold")

    ax_filter.scatter(index, filtered, s=6, facecolors="none", edgecolors=COLOR_POINTS, linewidths=0.5)
    ax_filter.plot(index, filtered, color=COLOR_CURVE, linewidth=1.1)
    ax_filter.set_ylim(0, np.nanmax(filtered))
    ax_filter.set_title(result.adaptive.method.label, fontsize=10, fontweight="bold")

    for ax in axes:
        ax.set_xlabel("Point_ID", fontsize=7)
        ax.set_ylabel("Measurement", fontsize=7)
        ax.tick_params(labelsize=6)

    fig.suptitle(f"Heart Rate: {result.heart_rate} bpm", fontsize=12, fontweight="bold")
    fig.tight_layout()

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, format="png")
    plt.close(fig)
    return output_path


def create_comparison_report(result: PipelineResult) -> str:
    """
    Create interactive HTML report using Plotly.

    The report contains:
    - Top row: raw series with LOESS fit, and filtered series
    - Bottom row: outlier scores with detected peaks for each method

    Returns
    -------
    str
        HTML string of the report.
    """
    fig = make_subplots(
        rows=2, cols=2,
        subplot_titles=(
            result.loess.method.label,
            result.adaptive.method.label,
            f"LOESS outlier score ({result.loess.n_peaks} peaks, {result.loess.heart_rate} bpm)",
            f"Filter outlier score ({result.adaptive.n_peaks} peaks, {result.adaptive.heart_rate} bpm)",
        ),
        vertical_spacing=0.12,
        horizontal_spacing=0.08,
    )

    index = result.series.index

    # Row 1: series and smoothed curves
    fig.add_trace(
        go.Scatter(
            x=index, y=result.series.values,
            mode='markers', name='Measurement',
            marker=dict(color=COLOR_POINTS, size=4, symbol='circle-open'),
            legendgroup="raw",
        ),
        row=1, col=1
    )
    fig.add_trace(
        go.Scatter(
            x=index, y=result.loess.curve,
            mode='lines', name='LOESS fit',
            line=dict(color=COLOR_CURVE, width=1.5),
        ),
        row=1, col=1
    )
    fig.add_trace(
        go.Scatter(
            x=index, y=result.adaptive.curve,
            mode='lines+markers', name='Filtered',
            line=dict(color=COLOR_CURVE, width=1.5),
            marker=dict(color=COLOR_POINTS, size=4, symbol='circle-open'),
        ),
        row=1, col=2
    )

    # Row 2: scores and peaks
    for col, detection in ((1, result.loess), (2, result.adaptive)):
        fig.add_trace(
            go.Scatter(
                x=index, y=detection.scores,
                mode='lines', name=f'Score ({detection.method.value})',
                line=dict(color="rgb(0, 100, 200)", width=1),
                showlegend=False,
            ),
            row=2, col=col
        )
        if detection.n_peaks > 0:
            # Peaks are 1-based positions
            positions = detection.peaks[detection.peaks <= len(index)]
            fig.add_trace(
                go.Scatter(
                    x=positions, y=detection.scores[positions - 1],
                    mode='markers', name='Peaks',
                    marker=dict(color=COLOR_PEAKS, size=7, symbol='x'),
                    legendgroup="peaks",
                    showlegend=(col == 1),
                ),
                row=2, col=col
            )

    fig.update_layout(
        title=f"Heart Rate: {result.heart_rate} bpm",
        plot_bgcolor="white",
        hovermode="x unified",
        height=800,
    )

    fig.update_xaxes(title_text="Point_ID", row=2, col=1)
    fig.update_xaxes(title_text="Point_ID", row=2, col=2)
    fig.update_yaxes(title_text="Measurement", row=1, col=1)
    fig.update_yaxes(title_text="Outlier score", row=2, col=1)

    html_content = fig.to_html(
        full_html=True,
        include_plotlyjs=True,
        config={
            'displayModeBar': True,
            'scrollZoom': True,
        }
    )

    return html_content


def save_comparison_report(result: PipelineResult, output_path: Path) -> Path:
    """Write the interactive HTML report."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(create_comparison_report(result))
    return output_path
