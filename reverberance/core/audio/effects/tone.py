# reverberance/core/audio/effects/tone.py

"""
Tone shaping of the wet signal.

Low and high tone controls range over [0, 1] with 0.5 as neutral. A non-neutral
control blends a 2nd-order Butterworth filtered copy of the signal back into
it: above 0.5 boosts the band, below 0.5 cuts it.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from reverberance.core.filters import high_pass_filter, low_pass_filter
from reverberance.errors import InvalidParameterError
from .utility import normalize_peak

logger = logging.getLogger(__name__)

NEUTRAL_TONE = 0.5
LOW_CUTOFF_HZ = 200.0
HIGH_CUTOFF_HZ = 3000.0
TONE_FILTER_ORDER = 2
TONE_MIX_DEPTH = 0.3


def _tone_to_mix(tone: float) -> float:
    """Maps a tone control in [0, 1] to a mix amount in [-1, 1]."""
    return (tone - NEUTRAL_TONE) * 2.0


def shape_tone(
    wet: NDArray[np.float64],
    low_tone: float,
    high_tone: float,
    sample_rate: int
) -> NDArray[np.float64]:
    """
    Applies the low/high tone controls to a mono wet signal.

    The low band is processed first; the high-pass filter then reads the
    bass-adjusted signal. Only the high band step re-normalizes the peak to 1.
    A control at exactly 0.5 skips its filter entirely.

    Args:
        wet: Wet signal (1D float64).
        low_tone: Bass control in [0, 1] (200 Hz low-pass blend).
        high_tone: Treble control in [0, 1] (3 kHz high-pass blend).
        sample_rate: Sampling rate (Hz). Must exceed 6 kHz when the treble
                     control is active.

    Returns:
        New tone-shaped signal (1D float64), a plain copy when both controls
        are neutral.

    Raises:
        InvalidParameterError: If a control is outside [0, 1], the input is not
                               1D, or a cutoff is above Nyquist.
    """
    wet = np.asarray(wet, dtype=np.float64)
    if wet.ndim != 1:
        raise InvalidParameterError("Wet signal must be a 1D array.")
    for name, value in (("low_tone", low_tone), ("high_tone", high_tone)):
        if not 0.0 <= value <= 1.0:
            raise InvalidParameterError(f"{name} must be between 0.0 and 1.0, got {value}.")

    shaped = wet.copy()

    if low_tone != NEUTRAL_TONE:
        low_mix = _tone_to_mix(low_tone)
        logger.info(f"Applying low tone: low_tone={low_tone} (mix={low_mix:+.2f}) at {LOW_CUTOFF_HZ:.0f} Hz")
        low_filtered = low_pass_filter(shaped, LOW_CUTOFF_HZ, sample_rate, order=TONE_FILTER_ORDER)
        shaped = shaped + low_mix * low_filtered * TONE_MIX_DEPTH

    if high_tone != NEUTRAL_TONE:
        high_mix = _tone_to_mix(high_tone)
        logger.info(f"Applying high tone: high_tone={high_tone} (mix={high_mix:+.2f}) at {HIGH_CUTOFF_HZ:.0f} Hz")
        high_filtered = high_pass_filter(shaped, HIGH_CUTOFF_HZ, sample_rate, order=TONE_FILTER_ORDER)
        if high_mix > 0:
            shaped = shaped + high_mix * high_filtered * TONE_MIX_DEPTH
        else:
            shaped = shaped - abs(high_mix) * high_filtered * TONE_MIX_DEPTH
        shaped = normalize_peak(shaped)

    return shaped
