#!/usr/bin/env python3
"""
ECG-SMT Heart Rate Estimation

This script estimates the heart rate from an ECG-SMT packet stream:
1. Decode channel-1 measurements from the hex packets
2. Detect peaks with LOESS smoothing
3. Detect peaks with the adaptive online repeated median filter
4. Convert peak counts to heart rate (256 Hz)
5. Save the comparison plot and result files

Usage:
    python src/run_heart_rate.py
    python src/run_heart_rate.py --input Data/recording.hex --html

Output:
    Results/ecg_plots.png             - Two-panel comparison plot
    Results/ecg_report.html           - Interactive report (--html)
    Results/heart_rate_summary.json   - Peaks and heart rates of both methods
    Results/ecg_series.csv            - Per-sample series, curves and scores
"""

import argparse
import sys
from pathlib import Path

# Ensure this script works when executed from any CWD.
sys.path.insert(0, str(Path(__file__).resolve().parent))

from ecg_smt_pipeline.config import Config
from ecg_smt_pipeline.errors import PipelineError
from ecg_smt_pipeline.packets import load_sample_signal, read_signal_file
from ecg_smt_pipeline.pipeline import run_pipeline
from ecg_smt_pipeline.io_utils import HeartRateSummary, save_summary_json, save_series_csv


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Estimate heart rate from an ECG-SMT packet stream",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyze the embedded sample recording
    python src/run_heart_rate.py

    # Analyze a recording and write an interactive report
    python src/run_heart_rate.py --input Data/recording.hex --html
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=Path,
        default=None,
        help="Hex packet file (default: embedded sample recording)"
    )

    parser.add_argument(
        "--output-dir", "-o",
        type=Path,
        default=None,
        help="Output directory (default: Results/)"
    )

    parser.add_argument(
        "--no-plot",
        action="store_true",
        help="Skip the PNG comparison plot"
    )

    parser.add_argument(
        "--html",
        action="store_true",
        help="Also write an interactive HTML report"
    )

    parser.add_argument(
        "--show-loess",
        action="store_true",
        help="Also print the LOESS-derived heart rate"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress progress messages"
    )

    args = parser.parse_args(argv)

    config = Config()
    verbose = not args.quiet
    output_dir = args.output_dir if args.output_dir is not None else config.get_results_dir()

    if verbose:
        print("=" * 60)
        print("ECG-SMT Heart Rate Estimation")
        print("=" * 60)
        print(f"Input: {args.input if args.input else 'embedded sample recording'}")
        print(f"Config: Fs={config.SAMPLING_RATE}Hz, LOESS span={config.LOESS_SPAN}, "
              f"filter width={config.FILTER_MIN_WIDTH}-{config.FILTER_MAX_WIDTH} "
              f"({config.FILTER_WIDTH_SEARCH})")

    try:
        raw = read_signal_file(args.input) if args.input else load_sample_signal()
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    try:
        if verbose:
            print("  [1/3] Decoding packets and detecting peaks...")

        result = run_pipeline(raw, config)

        if verbose:
            print(f"        ✓ Decoded {len(result.series):,} samples "
                  f"({result.duration_seconds:.2f}s) from {result.decode.n_packets:,} packets")
            if result.decode.skipped_packets:
                print(f"        ⚠ {len(result.decode.skipped_packets)} malformed packets skipped")
            for detection in (result.loess, result.adaptive):
                print(f"        ✓ {detection.method.label}: {detection.n_peaks} peaks")
                for note in detection.notes:
                    print(f"          {note}")

        if verbose:
            print("  [2/3] Saving results...")

        summary = HeartRateSummary.from_result(
            result, source=str(args.input) if args.input else None
        )
        summary_path = config.get_output_path(output_dir, config.SUMMARY_FILE)
        save_summary_json(summary, summary_path)
        series_path = config.get_output_path(output_dir, config.SERIES_FILE)
        save_series_csv(result, series_path)

        if verbose:
            print(f"        ✓ Saved: {summary_path.name}")
            print(f"        ✓ Saved: {series_path.name}")

        if not args.no_plot or args.html:
            if verbose:
                print("  [3/3] Rendering plots...")

            # Plotting stack is only imported when a plot is requested
            from ecg_smt_pipeline.report import render_comparison_png, save_comparison_report

            if not args.no_plot:
                plot_path = render_comparison_png(
                    result, config.get_output_path(output_dir, config.PLOT_FILE), config
                )
                if verbose:
                    print(f"        ✓ Saved: {plot_path.name}")
            if args.html:
                report_path = save_comparison_report(
                    result, config.get_output_path(output_dir, config.REPORT_FILE)
                )
                if verbose:
                    print(f"        ✓ Saved: {report_path.name}")

    except PipelineError as e:
        print(f"  ✗ ERROR: {e}")
        return 1

    print(f"\nHeart rate: {result.heart_rate} bpm")
    if args.show_loess:
        print(f"Heart rate (LOESS): {result.loess.heart_rate} bpm")
    if not args.no_plot:
        print(f'See also the "{config.PLOT_FILE}" file.')
    print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
