# tests/test_cli.py

"""
Tests for the pstretch CLI (main group, 'stretch' and 'info' commands).
"""

import importlib
import io

import pytest
import numpy as np
import soundfile as sf
from pathlib import Path
from click.testing import CliRunner

from pstretch.cli.main import cli
from pstretch.cli.stretch_cmd import derive_output_path
from pstretch.config import PstretchConfig
from pstretch.utils.progress import ChannelProgress

# --- Test Fixtures ---

@pytest.fixture
def runner() -> CliRunner:
    """Provides a Click CliRunner instance."""
    return CliRunner()

@pytest.fixture
def config() -> PstretchConfig:
    """Default configuration, so tests never read pstretch.toml files."""
    return PstretchConfig()

@pytest.fixture
def wav_file(tmp_path: Path) -> Path:
    """0.5 s of a 16-bit mono sine at 8 kHz."""
    sr = 8000
    t = np.arange(sr // 2) / sr
    path = tmp_path / "tone.wav"
    sf.write(str(path), 0.5 * np.sin(2 * np.pi * 440.0 * t), sr, subtype="PCM_16")
    return path

@pytest.fixture
def stereo_wav_file(tmp_path: Path) -> Path:
    """0.25 s of 24-bit stereo noise at 8 kHz."""
    sr = 8000
    data = np.random.default_rng(0).uniform(-0.5, 0.5, (sr // 4, 2))
    path = tmp_path / "stereo.wav"
    sf.write(str(path), data, sr, subtype="PCM_24")
    return path


def _invoke(runner, config, args):
    return runner.invoke(cli, args, obj={'config': config})


# --- Main group ---

def test_cli_help(runner: CliRunner, config):
    result = _invoke(runner, config, ["--help"])
    assert result.exit_code == 0
    assert "Commands:" in result.output
    assert "stretch" in result.output
    assert "info" in result.output

def test_cli_version(runner: CliRunner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "pstretch, version 0.1.0" in result.output.lower()

# --- stretch ---

def test_stretch_mono(runner: CliRunner, config, wav_file: Path, tmp_path: Path):
    """Stretching writes a file with the input's header and a longer duration."""
    output_file = tmp_path / "out.wav"
    args = ["stretch", str(wav_file), str(output_file), "-s", "3", "-w", "0.02", "--seed", "1"]
    result = _invoke(runner, config, args)
    assert result.exit_code == 0, f"CLI exited with code {result.exit_code}.\nOutput:\n{result.output}\nException:\n{result.exception}"
    assert "loaded file (channels: 1, bit_depth: 16, sample_rate: 8000)" in result.output
    assert "exporting..." in result.output
    assert "Successfully stretched" in result.output

    in_info = sf.info(str(wav_file))
    out_info = sf.info(str(output_file))
    assert out_info.subtype == in_info.subtype
    assert out_info.channels == in_info.channels
    assert out_info.samplerate == in_info.samplerate
    assert out_info.frames > 2 * in_info.frames

def test_stretch_is_reproducible_with_seed(runner: CliRunner, config, wav_file: Path, tmp_path: Path):
    outputs = []
    for name in ("a.wav", "b.wav"):
        output_file = tmp_path / name
        result = _invoke(runner, config, ["stretch", str(wav_file), str(output_file), "-w", "0.02", "--seed", "5"])
        assert result.exit_code == 0
        outputs.append(sf.read(str(output_file), dtype="int16")[0])
    np.testing.assert_array_equal(outputs[0], outputs[1])

def test_stretch_quiet_prints_nothing(runner: CliRunner, config, wav_file: Path, tmp_path: Path):
    """-q silences the status lines and the progress bar."""
    output_file = tmp_path / "quiet.wav"
    result = _invoke(runner, config, ["-q", "stretch", str(wav_file), str(output_file), "-w", "0.02", "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert result.output == ""
    assert output_file.exists()

def test_stretch_stereo(runner: CliRunner, config, stereo_wav_file: Path, tmp_path: Path):
    output_file = tmp_path / "stereo_out.wav"
    args = ["stretch", str(stereo_wav_file), str(output_file), "-s", "2", "-w", "0.02", "--window", "power_cosine"]
    result = _invoke(runner, config, args)
    assert result.exit_code == 0, result.output
    out_info = sf.info(str(output_file))
    assert out_info.channels == 2
    assert out_info.subtype == "PCM_24"

def test_stretch_derives_output_path(runner: CliRunner, config, wav_file: Path):
    result = _invoke(runner, config, ["stretch", str(wav_file), "-s", "1.5", "-w", "0.02"])
    assert result.exit_code == 0, result.output
    assert (wav_file.parent / "tone_stretched.wav").exists()

def test_stretch_uses_configured_defaults(runner: CliRunner, wav_file: Path, mocker):
    """Options left out on the command line come from the configuration."""
    config = PstretchConfig()
    config.stretch.stretch_factor = 2.5
    config.stretch.window_size_secs = 0.03
    config.stretch.output_suffix = "_long"
    config.stretch.seed = 4
    spy = mocker.spy(importlib.import_module("pstretch.cli.stretch_cmd"), "paulstretch_multichannel")
    result = _invoke(runner, config, ["stretch", str(wav_file)])
    assert result.exit_code == 0, result.output
    assert (wav_file.parent / "tone_long.wav").exists()
    args, kwargs = spy.call_args
    assert args[2] == 0.03
    assert args[3] == 2.5
    assert kwargs["seed"] == 4
    assert kwargs["window_shape"] == "hann"

def test_stretch_missing_file(runner: CliRunner, config, tmp_path: Path):
    result = _invoke(runner, config, ["stretch", str(tmp_path / "missing.wav"), str(tmp_path / "out.wav")])
    assert result.exit_code == 1
    assert "Input file not found" in result.output

def test_stretch_unsupported_channels(runner: CliRunner, config, tmp_path: Path):
    path = tmp_path / "three.wav"
    sf.write(str(path), np.zeros((800, 3)), 8000, subtype="PCM_16")
    result = _invoke(runner, config, ["stretch", str(path), str(tmp_path / "out.wav")])
    assert result.exit_code == 1
    assert "Unsupported number of channels (3)" in result.output

def test_stretch_undecodable_file(runner: CliRunner, config, tmp_path: Path):
    path = tmp_path / "garbage.wav"
    path.write_bytes(b"this is not a wav file")
    result = _invoke(runner, config, ["stretch", str(path), str(tmp_path / "out.wav")])
    assert result.exit_code == 1
    assert "Error" in result.output

@pytest.mark.parametrize("option", [["-s", "0"], ["-s", "-2"], ["-w", "-0.5"], ["--seed", "-1"]])
def test_stretch_invalid_parameters(runner: CliRunner, config, wav_file: Path, tmp_path: Path, option):
    result = _invoke(runner, config, ["stretch", str(wav_file), str(tmp_path / "out.wav"), *option])
    assert result.exit_code == 2

def test_derive_output_path():
    assert derive_output_path(Path("/music/song.wav"), "_stretched") == Path("/music/song_stretched.wav")
    assert derive_output_path(Path("/music/song"), "_x") == Path("/music/song_x.wav")

# --- info ---

def test_info(runner: CliRunner, config, stereo_wav_file: Path):
    result = _invoke(runner, config, ["info", str(stereo_wav_file)])
    assert result.exit_code == 0, result.output
    assert "channels:    2" in result.output
    assert "sample_rate: 8000" in result.output
    assert "bit_depth:   24" in result.output
    assert "format:      int" in result.output
    assert "duration:    0.250s" in result.output

def test_info_missing_file(runner: CliRunner, config, tmp_path: Path):
    result = _invoke(runner, config, ["info", str(tmp_path / "missing.wav")])
    assert result.exit_code == 1

# --- Progress rendering ---

def test_channel_progress_labels_each_channel():
    buf = io.StringIO()
    with ChannelProgress(file=buf) as progress:
        for channel in range(2):
            progress.start_channel(channel, 2)
            for i in range(10):
                progress(i, 10)
    output = buf.getvalue()
    assert "channel 1/2" in output
    assert "channel 2/2" in output

def test_channel_progress_hidden_writes_nothing():
    buf = io.StringIO()
    progress = ChannelProgress(file=buf, hidden=True)
    progress.start_channel(0, 1)
    progress(0, 5)
    progress.finish()
    assert buf.getvalue() == ""
