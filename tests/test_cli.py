# tests/test_cli.py

"""
Tests for the reverberance CLI: the main group and the 'render' and
'impulse' commands.
"""

import pytest
import numpy as np
import soundfile as sf
from pathlib import Path
from click.testing import CliRunner

from reverberance.cli import render_cmd as render_module
from reverberance.cli.main import cli
from reverberance.config import ReverbParameters

SR = 8000

# --- Test Fixtures ---

@pytest.fixture
def runner() -> CliRunner:
    """Provides a Click CliRunner instance."""
    return CliRunner()

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keeps user/project config files and environment overrides out of the tests."""
    import os
    for name in list(os.environ):
        if name.startswith("REVERBERANCE_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr("reverberance.config.loaders.USER_CONFIG_FILE", Path("/nonexistent/reverberance.toml"))
    monkeypatch.setattr("reverberance.config.loaders.PROJECT_CONFIG_FILE", Path("/nonexistent/project.toml"))

@pytest.fixture
def stereo_wav(tmp_path: Path) -> Path:
    """Half a second of stereo tones at 8 kHz."""
    t = np.arange(SR // 2) / SR
    data = np.stack([0.5 * np.sin(2 * np.pi * 440 * t), 0.4 * np.sin(2 * np.pi * 550 * t)], axis=1)
    path = tmp_path / "input.wav"
    sf.write(str(path), data, SR, subtype='FLOAT')
    return path

# --- Main Group ---

def test_cli_help(runner: CliRunner):
    """Test the main help message."""
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "Usage: main-cli [OPTIONS] COMMAND [ARGS]..." in result.output
    assert "synthetic room reverberation" in result.output
    assert "render" in result.output and "impulse" in result.output

def test_cli_version(runner: CliRunner):
    """Test the version option."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "reverberance, version 0.1.0" in result.output.lower()

# --- Render ---

def test_render_cmd(runner: CliRunner, stereo_wav: Path, tmp_path: Path):
    output_file = tmp_path / "out" / "reverb.wav"
    args = ["render", str(stereo_wav), "-o", str(output_file), "--decay-time", "0.3", "--seed", "7"]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, f"CLI exited with code {result.exit_code}.\nOutput:\n{result.output}\nException:\n{result.exception}"
    assert "Dynamic Range" in result.output
    assert "Reverberated audio saved as:" in result.output

    data, sr = sf.read(str(output_file), dtype='float64')
    assert sr == SR
    assert data.shape == (SR // 2, 2)
    assert np.max(np.abs(data)) == pytest.approx(0.95, abs=1e-3)

def test_render_cmd_is_reproducible_with_seed(runner: CliRunner, stereo_wav: Path, tmp_path: Path):
    outputs = []
    for name in ("a.wav", "b.wav"):
        output_file = tmp_path / name
        result = runner.invoke(cli, ["render", str(stereo_wav), "-o", str(output_file),
                                     "--decay-time", "0.3", "--seed", "3"])
        assert result.exit_code == 0, result.output
        outputs.append(sf.read(str(output_file), dtype='float64')[0])
    np.testing.assert_array_equal(outputs[0], outputs[1])

def test_render_cmd_passes_overrides(runner: CliRunner, stereo_wav: Path, tmp_path: Path, mocker):
    """CLI options override the configured preset; unset options keep it."""
    spy = mocker.spy(render_module, "render_reverb")
    output_file = tmp_path / "reverb.wav"
    args = ["render", str(stereo_wav), "-o", str(output_file), "--decay-time", "0.3",
            "--room-size", "0.2", "--no-stereo", "--max-duration", "0.25"]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output

    params = spy.call_args[0][1]
    assert spy.call_args.kwargs["max_duration"] == 0.25
    assert params.room_size == 0.2
    assert params.enable_stereo is False
    assert params.damping == ReverbParameters().damping
    # --max-duration shortens the processed signal
    data, _ = sf.read(str(output_file), dtype='float64')
    assert data.shape == (SR // 4, 2)

def test_render_cmd_rejects_out_of_range_option(runner: CliRunner, stereo_wav: Path, tmp_path: Path):
    result = runner.invoke(cli, ["render", str(stereo_wav), "-o", str(tmp_path / "x.wav"), "--damping", "1.5"])
    assert result.exit_code == 2

def test_render_cmd_missing_input(runner: CliRunner, tmp_path: Path):
    result = runner.invoke(cli, ["render", str(tmp_path / "missing.wav"), "-o", str(tmp_path / "x.wav")])
    assert result.exit_code == 2

def test_render_cmd_bad_output_extension(runner: CliRunner, stereo_wav: Path, tmp_path: Path):
    result = runner.invoke(cli, ["render", str(stereo_wav), "-o", str(tmp_path / "out.xyz"), "--decay-time", "0.3"])
    assert result.exit_code == 2
    assert "Error during reverb rendering" in result.output

# --- Impulse ---

def test_impulse_cmd(runner: CliRunner, tmp_path: Path):
    output_file = tmp_path / "ir.wav"
    args = ["impulse", "-o", str(output_file), "--sample-rate", str(SR), "--decay-time", "0.5", "--seed", "1"]
    result = runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert f"Impulse response (4000 samples at {SR} Hz) saved as:" in result.output

    ir, sr = sf.read(str(output_file), dtype='float64')
    assert sr == SR
    assert ir.shape == (4000,)
    assert np.max(np.abs(ir)) == pytest.approx(1.0, abs=1e-6)

def test_impulse_cmd_decay_shorter_than_one_sample(runner: CliRunner, tmp_path: Path):
    args = ["impulse", "-o", str(tmp_path / "ir.wav"), "--sample-rate", str(SR), "--decay-time", "0.00001"]
    result = runner.invoke(cli, args)
    assert result.exit_code == 2
    assert "Error during impulse response synthesis" in result.output

def test_impulse_cmd_rejects_zero_decay(runner: CliRunner, tmp_path: Path):
    result = runner.invoke(cli, ["impulse", "-o", str(tmp_path / "ir.wav"), "--decay-time", "0"])
    assert result.exit_code == 2

# --- Configuration ---

def test_invalid_reverb_config_fails(runner: CliRunner, tmp_path: Path):
    """An out-of-domain [reverb] value stops the run instead of using the preset."""
    config_file = tmp_path / "bad.toml"
    config_file.write_text("[reverb]\ndecay_time_seconds = -1.0\nroom_size = 0.1\n")
    output_file = tmp_path / "ir.wav"
    result = runner.invoke(cli, ["-c", str(config_file), "impulse", "-o", str(output_file),
                                 "--sample-rate", str(SR)])
    assert result.exit_code == 1
    assert not output_file.exists()

def test_config_preset_used_by_impulse(runner: CliRunner, tmp_path: Path):
    config_file = tmp_path / "short.toml"
    config_file.write_text("[reverb]\ndecay_time_seconds = 0.25\n")
    output_file = tmp_path / "ir.wav"
    result = runner.invoke(cli, ["-c", str(config_file), "impulse", "-o", str(output_file),
                                 "--sample-rate", str(SR), "--seed", "0"])
    assert result.exit_code == 0, result.output
    assert sf.info(str(output_file)).frames == SR // 4

def test_default_output_directory(runner: CliRunner, stereo_wav: Path, tmp_path: Path):
    """Without -o, files are written to paths.output_dir."""
    out_dir = tmp_path / "rendered"
    config_file = tmp_path / "paths.toml"
    config_file.write_text(f"[paths]\noutput_dir = \"{out_dir.as_posix()}\"\n")

    result = runner.invoke(cli, ["-c", str(config_file), "render", str(stereo_wav), "--decay-time", "0.3"])
    assert result.exit_code == 0, result.output
    assert (out_dir / "input_reverb.wav").is_file()

    result = runner.invoke(cli, ["-c", str(config_file), "impulse", "--sample-rate", str(SR), "--decay-time", "0.3"])
    assert result.exit_code == 0, result.output
    assert sf.info(str(out_dir / "impulse_response.wav")).frames == int(round(0.3 * SR))
