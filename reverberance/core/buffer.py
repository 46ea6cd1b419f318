# reverberance/core/buffer.py

"""
Audio buffer container and the signal preparation stage.

The preparation stage turns an externally decoded recording into the two
signals the reverb pipeline consumes: a mono analysis signal that feeds the
convolution engine, and a dry stereo pair that is mixed back in at the end.
"""

import logging
from numbers import Integral
from typing import NamedTuple, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from reverberance.errors import InvalidParameterError, LengthMismatchError

logger = logging.getLogger(__name__)

# Analysis window applied to the input recording (seconds)
DEFAULT_MAX_DURATION = 20.0


def check_sample_rate(sample_rate: int) -> int:
    """Validates a sampling rate and returns it as a plain int."""
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, Integral) or sample_rate <= 0:
        raise InvalidParameterError(f"sample_rate must be a positive integer, got {sample_rate!r}.")
    return int(sample_rate)


class AudioBuffer:
    """
    Immutable multi-channel audio buffer.

    Samples are stored as a read-only float64 array of shape
    (n_channels, n_samples) with one or two channels. A 1-D array is
    accepted as mono.

    Raises:
        InvalidParameterError: For a bad sample rate, channel count or array rank.
        LengthMismatchError: If planar channels differ in length.
    """

    def __init__(self, data: ArrayLike, sample_rate: int):
        self._sample_rate = check_sample_rate(sample_rate)

        if isinstance(data, (list, tuple)) and data and all(np.ndim(ch) == 1 for ch in data):
            lengths = {len(ch) for ch in data}
            if len(lengths) > 1:
                raise LengthMismatchError(f"All channels must have equal length, got lengths {sorted(lengths)}.")

        array = np.array(data, dtype=np.float64)  # Always copy: the buffer owns its samples
        if array.ndim == 1:
            array = array[np.newaxis, :]
        if array.ndim != 2:
            raise InvalidParameterError(f"Audio data must be 1D or 2D (channels, samples), got shape {array.shape}.")
        if array.shape[0] not in (1, 2):
            raise InvalidParameterError(f"Only mono or stereo buffers are supported, got {array.shape[0]} channels.")

        array.flags.writeable = False
        self._data = array

    # --- Alternative constructors ---

    @classmethod
    def from_channels(
        cls,
        left: Sequence[float],
        right: Optional[Sequence[float]] = None,
        sample_rate: int = 44100
    ) -> "AudioBuffer":
        """Builds a buffer from planar channel sequences (mono if `right` is None)."""
        if right is None:
            return cls([np.asarray(left, dtype=np.float64)], sample_rate)
        return cls([np.asarray(left, dtype=np.float64), np.asarray(right, dtype=np.float64)], sample_rate)

    @classmethod
    def from_interleaved(cls, samples: Sequence[float], n_channels: int, sample_rate: int) -> "AudioBuffer":
        """Builds a buffer from frames interleaved as L, R, L, R, ..."""
        if n_channels not in (1, 2):
            raise InvalidParameterError(f"n_channels must be 1 or 2, got {n_channels}.")
        flat = np.asarray(samples, dtype=np.float64).ravel()
        if flat.size % n_channels != 0:
            raise LengthMismatchError(
                f"Interleaved sample count ({flat.size}) is not a multiple of the channel count ({n_channels})."
            )
        return cls(flat.reshape(-1, n_channels).T, sample_rate)

    # --- Properties ---

    @property
    def data(self) -> NDArray[np.float64]:
        """Read-only (n_channels, n_samples) sample array."""
        return self._data

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def n_channels(self) -> int:
        return self._data.shape[0]

    @property
    def n_samples(self) -> int:
        return self._data.shape[1]

    @property
    def duration(self) -> float:
        """Length of the buffer in seconds."""
        return self.n_samples / self._sample_rate

    @property
    def is_stereo(self) -> bool:
        return self.n_channels == 2

    @property
    def left(self) -> NDArray[np.float64]:
        return self._data[0]

    @property
    def right(self) -> NDArray[np.float64]:
        """Right channel; for mono buffers this is the only channel."""
        return self._data[-1]

    # --- Channel layout helpers ---

    def mono(self) -> NDArray[np.float64]:
        """Returns a new mono signal (mean of the channels)."""
        return np.mean(self._data, axis=0)

    def as_stereo(self) -> NDArray[np.float64]:
        """Returns a new (2, n_samples) array; mono is duplicated to both channels."""
        if self.is_stereo:
            return self._data.copy()
        return np.repeat(self._data, 2, axis=0)

    def truncated(self, n_samples: int) -> "AudioBuffer":
        """Returns a new buffer holding at most the first `n_samples` samples."""
        return AudioBuffer(self._data[:, :n_samples], self._sample_rate)

    def __len__(self) -> int:
        return self.n_samples

    def __repr__(self) -> str:
        return f"AudioBuffer(channels={self.n_channels}, samples={self.n_samples}, sample_rate={self._sample_rate})"


class PreparedSignal(NamedTuple):
    """Output of the preparation stage."""
    mono: NDArray[np.float64]
    dry: NDArray[np.float64]
    sample_rate: int
    is_stereo: bool


def prepare_signal(
    buffer: AudioBuffer,
    max_duration: Optional[float] = DEFAULT_MAX_DURATION
) -> PreparedSignal:
    """
    Normalizes channel layout and truncates the input to the analysis window.

    Args:
        buffer: Decoded input audio (mono or stereo).
        max_duration: Length of the analysis window in seconds (default: 20.0).
                      None processes the whole buffer.

    Returns:
        PreparedSignal with the mono analysis signal (1D), the dry stereo pair
        (shape (2, n)), the sample rate and whether the input was stereo.

    Raises:
        InvalidParameterError: If max_duration is not positive.
    """
    if max_duration is not None and max_duration <= 0:
        raise InvalidParameterError(f"max_duration must be positive, got {max_duration}.")

    n_samples = buffer.n_samples
    if max_duration is not None:
        n_samples = min(n_samples, int(round(max_duration * buffer.sample_rate)))
        if n_samples < buffer.n_samples:
            logger.info(f"Truncating input from {buffer.duration:.2f}s to the {max_duration:.2f}s analysis window.")
        buffer = buffer.truncated(n_samples)

    mono = buffer.mono()
    dry = buffer.as_stereo()
    logger.debug(f"Prepared signal: {n_samples} samples, stereo={buffer.is_stereo}, sr={buffer.sample_rate}")
    return PreparedSignal(mono=mono, dry=dry, sample_rate=buffer.sample_rate, is_stereo=buffer.is_stereo)
