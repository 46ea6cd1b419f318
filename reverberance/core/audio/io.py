# reverberance/core/audio/io.py

"""
Decoding and encoding of audio files around the reverb pipeline.

librosa decodes input recordings into planar (channels, samples) float64
arrays ready for AudioBuffer; soundfile writes rendered buffers back out.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import librosa
import numpy as np
import soundfile as sf
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

SUPPORTED_WRITE_EXTENSIONS = {f".{fmt.lower()}" for fmt in sf.available_formats()}


def load_audio(
    file_path: Path,
    sr: Optional[int] = None,
    mono: bool = False,
    duration: Optional[float] = None
) -> Tuple[NDArray[np.float64], int]:
    """
    Decodes an audio file.

    Args:
        file_path: File to decode (any format librosa/soundfile can read).
        sr: Resample to this rate; None keeps the file's own rate.
        mono: Average all channels into one.
        duration: Decode at most this many seconds.

    Returns:
        (samples, sample_rate): float64 samples shaped (n_samples,) for a mono
        result, (n_channels, n_samples) otherwise.

    Raises:
        FileNotFoundError: If nothing exists at `file_path`.
        ValueError: If `file_path` is a directory or other non-file.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Audio input file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Input path is not a file: {path}")

    logger.info(f"Decoding {path} (sr={'native' if sr is None else sr}, mono={mono})")
    try:
        samples, rate = librosa.load(path, sr=sr, mono=mono, duration=duration)
    except Exception as e:
        logger.error(f"Could not decode {path}: {e}")
        raise

    logger.debug(f"Decoded {samples.shape} samples at {rate} Hz.")
    return samples.astype(np.float64, copy=False), int(rate)


def _as_frames(data: NDArray[np.float64]) -> NDArray[np.float64]:
    """Converts planar (channels, samples) data to soundfile's (frames, channels) layout."""
    if data.ndim == 1:
        return data
    if data.ndim == 2:
        return data.T
    raise ValueError(f"Audio data must be 1D (mono) or 2D (channels, samples), got shape {data.shape}")


def _clip_for_pcm(frames: NDArray[np.float64], subtype: str) -> NDArray[np.float64]:
    """Clips samples to [-1, 1] so integer encodings do not wrap around."""
    peak = float(np.max(np.abs(frames))) if frames.size else 0.0
    if peak <= 1.0:
        return frames
    logger.warning(f"Peak {peak:.4f} exceeds full scale for subtype '{subtype}'; clipping to [-1, 1].")
    return np.clip(frames, -1.0, 1.0)


def save_audio(
    data: NDArray[np.float64],
    sr: int,
    output_path: Path,
    subtype: Optional[str] = 'PCM_16'
) -> None:
    """
    Encodes audio to a file whose container follows the path extension.

    Args:
        data: Samples shaped (n_samples,) or (n_channels, n_samples).
        sr: Sampling rate (Hz).
        output_path: Destination; missing parent directories are created.
        subtype: Soundfile subtype such as 'PCM_16' or 'FLOAT'. PCM output is
                 clipped to [-1, 1].

    Raises:
        ValueError: For an extension soundfile cannot write or a bad data shape.
    """
    path = Path(output_path)
    extension = path.suffix.lower()
    if extension not in SUPPORTED_WRITE_EXTENSIONS:
        raise ValueError(f"Unsupported audio output extension: '{extension}'. "
                         f"Supported extensions: {sorted(SUPPORTED_WRITE_EXTENSIONS)}")

    frames = _as_frames(np.asarray(data, dtype=np.float64))
    if subtype and 'PCM' in subtype:
        frames = _clip_for_pcm(frames, subtype)

    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Writing {path} (sr={sr}, subtype={subtype})")
    try:
        sf.write(path, frames, sr, subtype=subtype, format=extension[1:].upper())
    except Exception as e:
        logger.error(f"Could not write {path}: {e}")
        raise
    logger.debug(f"Wrote {frames.shape[0]} frames to {path}")
