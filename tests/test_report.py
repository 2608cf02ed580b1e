from ecg_smt_pipeline.report import (
    create_comparison_report,
    render_comparison_png,
    save_comparison_report,
)


def test_png_is_written(sample_result, tmp_path):
    path = render_comparison_png(sample_result, tmp_path / "plots" / "ecg_plots.png")

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_html_report_mentions_heart_rate(sample_result):
    html = create_comparison_report(sample_result)

    assert f"Heart Rate: {sample_result.heart_rate} bpm" in html
    assert "Adaptive online repeated median filter" in html
    assert "LOESS smoothing" in html


def test_html_report_is_written(sample_result, tmp_path):
    path = save_comparison_report(sample_result, tmp_path / "report.html")
    assert "<html" in path.read_text(encoding="utf-8")
