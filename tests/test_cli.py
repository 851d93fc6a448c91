"""Tests for the vadclips-clip command line front end."""

import io
import numpy as np
import pytest
import soundfile as sf

from vadclips import cli


@pytest.fixture
def quiet_logging(monkeypatch):
    calls = []

    def fake_setup(**kwargs):
        calls.append(kwargs)

    monkeypatch.setattr(cli, "setup_logging", fake_setup)
    return calls


@pytest.fixture
def tone_file(tmp_path):
    path = tmp_path / "speech.wav"
    t = np.arange(8000) / 16000
    sf.write(path, (0.2 * np.sin(2 * np.pi * 300 * t)).astype(np.float32), 16000, subtype="PCM_16")
    return path


def test_back_to_back_bursts_give_one_clip(tone_file, quiet_logging):
    out = io.StringIO()
    code = cli.run([str(tone_file), "--no-timing", "--burst-seconds", "0.1"], out=out)

    assert code == 0
    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("clip 1: 0.500s 8000 samples blob:vadclips/")


def test_timed_replay_splits_on_long_gaps(tone_file, quiet_logging):
    out = io.StringIO()
    code = cli.run([str(tone_file), "--burst-seconds", "0.25", "--gap-seconds", "0.15",
                    "--silence-timeout", "0.05", "-v"], out=out)

    assert code == 0
    lines = out.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[1].startswith("clip 2: 0.250s 4000 samples")
    assert "SessionAccumulator" in quiet_logging[0]["info_loggers"]


def test_config_file_is_used(tone_file, tmp_path, quiet_logging):
    config_path = tmp_path / "clipper.yaml"
    config_path.write_text("handle_prefix: blob:kiosk\nburst_seconds: 0.5\nlog_level: error\n")
    out = io.StringIO()

    cli.run([str(tone_file), "--config", str(config_path), "--no-timing"], out=out)

    assert "blob:kiosk/" in out.getvalue()
    assert quiet_logging[0]["default_level"] == "ERROR"


def test_missing_audio_file_is_a_usage_error(tmp_path, quiet_logging):
    with pytest.raises(SystemExit) as info:
        cli.run([str(tmp_path / "nope.wav")])
    assert info.value.code == 2


def test_invalid_override_is_a_usage_error(tone_file, quiet_logging):
    with pytest.raises(SystemExit):
        cli.run([str(tone_file), "--silence-timeout", "0"])


def test_mistyped_config_is_a_usage_error(tone_file, tmp_path, quiet_logging):
    config_path = tmp_path / "clipper.yaml"
    config_path.write_text("silence_timeout: fast\n")
    with pytest.raises(SystemExit) as info:
        cli.run([str(tone_file), "--config", str(config_path)])
    assert info.value.code == 2


def test_unsupported_sample_rate_exits_with_error(tmp_path, quiet_logging):
    path = tmp_path / "cd_quality.wav"
    sf.write(path, np.zeros(4410, dtype=np.float32), 44100, subtype="PCM_16")
    out = io.StringIO()

    code = cli.run([str(path), "--no-timing"], out=out)

    assert code == 1
    assert out.getvalue() == ""
