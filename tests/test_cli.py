from conftest import SAMPLE_PACKET, make_packet
from run_heart_rate import main


def test_default_run_writes_outputs(tmp_path, capsys):
    assert main(["--output-dir", str(tmp_path), "--quiet"]) == 0

    out = capsys.readouterr().out
    assert "Heart rate:" in out
    assert "(LOESS)" not in out
    assert (tmp_path / "ecg_plots.png").exists()
    assert (tmp_path / "heart_rate_summary.json").exists()
    assert (tmp_path / "ecg_series.csv").exists()
    assert not (tmp_path / "ecg_report.html").exists()


def test_html_and_loess_output(tmp_path, capsys):
    assert main(["-o", str(tmp_path), "--no-plot", "--html", "--show-loess"]) == 0

    out = capsys.readouterr().out
    assert "Heart rate (LOESS):" in out
    assert "✓ Saved: ecg_report.html" in out
    assert (tmp_path / "ecg_report.html").exists()
    assert not (tmp_path / "ecg_plots.png").exists()


def test_missing_input_file(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "missing.hex"), "-o", str(tmp_path), "-q"]) == 1
    assert "not found" in capsys.readouterr().out


def test_malformed_stream_fails(tmp_path, capsys):
    path = tmp_path / "bad.hex"
    path.write_text(SAMPLE_PACKET + "A5", encoding="ascii")

    assert main(["-i", str(path), "-o", str(tmp_path), "-q"]) == 1
    assert "ERROR" in capsys.readouterr().out


def test_flat_stream_is_degenerate(tmp_path, capsys):
    path = tmp_path / "flat.hex"
    path.write_text("".join(make_packet(512, seq=i) for i in range(40)), encoding="ascii")

    assert main(["-i", str(path), "-o", str(tmp_path), "-q", "--no-plot"]) == 1
    assert "Residual IQR" in capsys.readouterr().out


def test_short_stream_fails_cleanly(tmp_path, capsys):
    path = tmp_path / "short.hex"
    path.write_text("".join(make_packet(500 + 10 * i, seq=i) for i in range(15)), encoding="ascii")

    assert main(["-i", str(path), "-o", str(tmp_path), "-q", "--no-plot"]) == 1
    out = capsys.readouterr().out
    assert "✗ ERROR" in out
    assert "too short" in out


def test_stream_of_malformed_packets_fails_cleanly(tmp_path, capsys):
    path = tmp_path / "garbage.hex"
    path.write_text("Z" * 68, encoding="ascii")

    assert main(["-i", str(path), "-o", str(tmp_path), "-q", "--no-plot"]) == 1
    assert "No valid packets" in capsys.readouterr().out
