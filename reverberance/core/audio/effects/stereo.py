# reverberance/core/audio/effects/stereo.py

"""
Stereo widening of a mono wet signal using an inter-channel delay and
Mid/Side width scaling.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import NDArray

from reverberance.errors import InvalidParameterError

logger = logging.getLogger(__name__)

INTER_CHANNEL_DELAY_SECONDS = 0.001


def delay_signal(y: NDArray[np.float64], delay_samples: int) -> NDArray[np.float64]:
    """Delays a 1D signal by zero-padding the head and truncating the tail."""
    delayed = np.zeros_like(y)
    if delay_samples <= 0:
        delayed[:] = y
    elif delay_samples < len(y):
        delayed[delay_samples:] = y[:len(y) - delay_samples]
    return delayed


def widen_stereo(
    wet_mono: NDArray[np.float64],
    width: float,
    enabled: bool,
    sample_rate: int
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Derives left/right wet channels from a mono wet signal.

    The right channel is the signal delayed by 1 ms. The pair is converted to
    Mid/Side, the Side component is scaled by `width`, and the pair is
    reconstructed:

        mid   = (left + right) / 2
        side  = (left - right) / 2 * width
        left  = mid + side
        right = mid - side

    Width 0 collapses both channels to the mid signal; width 1 keeps the full
    1 ms decorrelation (left is the input, right the delayed input).

    Args:
        wet_mono: Mono wet signal (1D float64).
        width: Stereo width in [0, 1].
        enabled: If False, both channels are copies of the input.
        sample_rate: Sampling rate (Hz).

    Returns:
        Tuple (left, right) of new 1D float64 arrays with the input's length.

    Raises:
        InvalidParameterError: If the input is not 1D or width is outside [0, 1].
    """
    wet_mono = np.asarray(wet_mono, dtype=np.float64)
    if wet_mono.ndim != 1:
        raise InvalidParameterError("Wet signal must be a 1D array.")
    if not 0.0 <= width <= 1.0:
        raise InvalidParameterError(f"stereo width must be between 0.0 and 1.0, got {width}.")

    if not enabled:
        logger.debug("Stereo widening disabled; duplicating the wet signal.")
        return wet_mono.copy(), wet_mono.copy()

    delay_samples = int(round(INTER_CHANNEL_DELAY_SECONDS * sample_rate))
    logger.info(f"Applying stereo widening: width={width}, inter-channel delay={delay_samples} samples")

    left = wet_mono
    right = delay_signal(wet_mono, delay_samples)

    mid = (left + right) / 2.0
    side = (left - right) / 2.0 * width

    return mid + side, mid - side
