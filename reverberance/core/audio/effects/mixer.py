# reverberance/core/audio/effects/mixer.py

"""
Dry/wet mixing and final peak normalization.
"""

import logging

import numpy as np
from numpy.typing import NDArray

from reverberance.errors import InvalidParameterError, LengthMismatchError
from .utility import normalize_peak

logger = logging.getLogger(__name__)

OUTPUT_HEADROOM = 0.95


def _check_stereo(name: str, y: NDArray[np.float64]) -> NDArray[np.float64]:
    y = np.asarray(y, dtype=np.float64)
    if y.ndim != 2 or y.shape[0] != 2:
        raise InvalidParameterError(f"{name} must be a stereo array with shape (2, n_samples), got {y.shape}.")
    return y


def mix_dry_wet(
    dry: NDArray[np.float64],
    wet: NDArray[np.float64],
    dry_level: float,
    wet_level: float,
    headroom: float = OUTPUT_HEADROOM
) -> NDArray[np.float64]:
    """
    Mixes dry and wet stereo signals and peak-normalizes the result.

    output = dry_level * dry + wet_level * wet, then every sample is divided by
    the global peak across both channels and scaled by `headroom`. A silent
    mix is returned unscaled.

    Args:
        dry: Dry stereo signal, shape (2, n_samples).
        wet: Wet stereo signal, shape (2, n_samples).
        dry_level: Dry gain in [0, 1].
        wet_level: Wet gain in [0, 1].
        headroom: Peak level of the normalized output (default: 0.95).

    Returns:
        New (2, n_samples) float64 array.

    Raises:
        InvalidParameterError: If a level is outside [0, 1] or an input is not stereo.
        LengthMismatchError: If dry and wet differ in length.
    """
    dry = _check_stereo("dry", dry)
    wet = _check_stereo("wet", wet)
    if dry.shape[1] != wet.shape[1]:
        raise LengthMismatchError(f"Dry ({dry.shape[1]}) and wet ({wet.shape[1]}) signals differ in length.")
    if not 0.0 <= dry_level <= 1.0:
        raise InvalidParameterError("dry_level must be between 0.0 and 1.0.")
    if not 0.0 <= wet_level <= 1.0:
        raise InvalidParameterError("wet_level must be between 0.0 and 1.0.")

    logger.info(f"Mixing signals: dry={dry_level}, wet={wet_level}, headroom={headroom}")
    mixed = dry_level * dry + wet_level * wet
    return normalize_peak(mixed, target=headroom)
