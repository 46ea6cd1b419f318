# tests/test_audio_io.py

import pytest
import numpy as np
import soundfile as sf
from pathlib import Path
from numpy.testing import assert_allclose

from reverberance.core.audio.io import load_audio, save_audio


def _sine(sr: int, freq: float, duration: float = 0.5, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(sr * duration)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


def test_save_audio(tmp_path: Path):
    """Test saving a mono file with the default PCM_16 subtype."""
    sr = 22050
    data = _sine(sr, 440.0)
    out_file = tmp_path / "out_test.wav"

    save_audio(data, sr, out_file)
    assert out_file.exists()

    loaded_data, loaded_sr = sf.read(str(out_file), dtype='float64')
    assert loaded_sr == sr
    assert_allclose(data, loaded_data, atol=1e-4)  # PCM_16 quantization

def test_save_and_load_stereo(tmp_path: Path):
    """Stereo (channels, samples) data survives a FLOAT save/load cycle."""
    sr = 16000
    data = np.stack([_sine(sr, 440.0), _sine(sr, 660.0, amplitude=0.3)])
    out_file = tmp_path / "nested" / "stereo.wav"

    save_audio(data, sr, out_file, subtype='FLOAT')
    assert out_file.exists(), "Parent directories should be created."
    assert sf.info(str(out_file)).channels == 2

    loaded, loaded_sr = load_audio(out_file, sr=None, mono=False)
    assert loaded_sr == sr
    assert loaded.dtype == np.float64
    assert loaded.shape == data.shape
    assert_allclose(loaded, data, atol=1e-6)

def test_load_audio_mono_downmix(tmp_path: Path):
    sr = 16000
    data = np.stack([_sine(sr, 440.0), np.zeros(sr // 2)])
    out_file = tmp_path / "stereo.wav"
    save_audio(data, sr, out_file, subtype='FLOAT')

    mono, _ = load_audio(out_file, sr=None, mono=True)
    assert mono.ndim == 1
    assert_allclose(mono, data.mean(axis=0), atol=1e-6)

def test_save_audio_clips_pcm(tmp_path: Path):
    sr = 8000
    data = np.array([0.0, 1.5, -2.0, 0.5])
    out_file = tmp_path / "clipped.wav"
    save_audio(data, sr, out_file, subtype='PCM_16')
    loaded, _ = sf.read(str(out_file), dtype='float64')
    assert np.max(np.abs(loaded)) <= 1.0

def test_save_audio_unsupported_extension(tmp_path: Path):
    with pytest.raises(ValueError, match="Unsupported audio output extension"):
        save_audio(np.zeros(100), 8000, tmp_path / "out.xyz")

def test_save_audio_bad_shape(tmp_path: Path):
    with pytest.raises(ValueError, match="1D"):
        save_audio(np.zeros((2, 2, 2)), 8000, tmp_path / "out.wav")

def test_load_audio_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_audio(tmp_path / "does_not_exist.wav")

def test_load_audio_directory(tmp_path: Path):
    with pytest.raises(ValueError, match="not a file"):
        load_audio(tmp_path)
