"""
Tests for csq_reader.cli.
"""
import re

import pytest

import csq_reader.cli as cli
import csq_reader.export as export
from csq_reader.reader import CSQReader

from conftest import FakeDecoder, FakeMetadataExtractor


@pytest.fixture
def cli_decoder():
    return FakeDecoder()


@pytest.fixture
def csq_file(tmp_path, stream_bytes, cli_decoder, monkeypatch):
    path = tmp_path / "recording.csq"
    path.write_bytes(stream_bytes)

    def fake_read_csq(file_path):
        return CSQReader(
            file_path, metadata_extractor=FakeMetadataExtractor(), image_decoder=cli_decoder
        )

    monkeypatch.setattr(cli, "read_csq", fake_read_csq)
    return path


def test_info_and_stats(csq_file, capsys):
    cli.main([str(csq_file), "--info", "--stats"])
    out = capsys.readouterr().out
    assert "Camera model: FLIR T540" in out
    assert out.count("=== FRAME") == 5
    assert "Frames read: 5" in out


def test_max_frames(csq_file, capsys):
    cli.main([str(csq_file), "--max-frames", "2"])
    assert "Frames read: 2" in capsys.readouterr().out


def test_export(csq_file, tmp_path, capsys):
    out_dir = tmp_path / "frames"
    cli.main([str(csq_file), "--output-dir", str(out_dir), "--format", "npy"])
    assert sorted(p.name for p in out_dir.iterdir()) == [f"frame_{i:05d}.npy" for i in range(5)]
    assert "5 frames written" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "missing.csq")])
    assert excinfo.value.code == 1
    assert "File not found" in capsys.readouterr().err


def stat(out, name):
    value = re.search(rf"{name} temperature: (-?[\d.]+)", out).group(1)
    return float(value)


def test_stats_in_fahrenheit(csq_file, capsys):
    cli.main([str(csq_file), "--stats", "--unit", "F", "--max-frames", "1"])
    out = capsys.readouterr().out
    assert "°F" in out and "°C" not in out
    assert stat(out, "Minimum") == pytest.approx(68.0, abs=0.1)
    assert stat(out, "Average") == pytest.approx(68.0, abs=0.1)
    assert "Temperature range: 0.00°F" in out


def test_stats_in_kelvin(csq_file, capsys):
    cli.main([str(csq_file), "--stats", "--unit", "K", "--max-frames", "1"])
    out = capsys.readouterr().out
    assert stat(out, "Maximum") == pytest.approx(293.15, abs=0.05)
    assert "Temperature range: 0.00K" in out


def failing_save(path, data):
    raise OSError("disk full")


def test_export_failure_exits(csq_file, tmp_path, capsys, monkeypatch):
    monkeypatch.setattr(export.np, "save", failing_save)
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(csq_file), "--output-dir", str(tmp_path / "frames"), "--format", "npy"])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert [line for line in err.splitlines() if line.startswith("Error:")] == ["Error: disk full"]


@pytest.mark.parametrize("cli_decoder", [FakeDecoder(fail_on={2})])
def test_strict_error_not_replaced_by_export_failure(csq_file, tmp_path, capsys, caplog, monkeypatch):
    monkeypatch.setattr(export.np, "save", failing_save)
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(csq_file), "--strict", "--output-dir", str(tmp_path / "frames"), "--format", "npy"])
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert [line for line in err.splitlines() if line.startswith("Error:")] == [
        "Error: bad jpeg in frame 2"
    ]
    assert "Cannot finish export: disk full" in caplog.text
