# reverberance/core/audio/effects/utility.py

"""
Small helpers shared by the reverb stages.
"""

import logging

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def peak_of(y: NDArray[np.float64]) -> float:
    """Largest absolute sample value (0.0 for an empty array)."""
    if y.size == 0:
        return 0.0
    return float(np.max(np.abs(y)))


def normalize_peak(y: NDArray[np.float64], target: float = 1.0) -> NDArray[np.float64]:
    """
    Scales a signal so its peak absolute value equals `target`.

    The input is never modified. An all-zero (or empty) signal cannot be
    normalized; a copy is returned unscaled instead of dividing by zero.

    Args:
        y: Input signal (any shape, float64). The peak is taken over all samples.
        target: Desired peak level (default: 1.0).

    Returns:
        New normalized array (float64).
    """
    peak = peak_of(y)
    if peak == 0.0:
        logger.debug("Signal is silent; skipping peak normalization.")
        return np.array(y, dtype=np.float64, copy=True)
    # Divide first: the peak sample then maps to exactly `target`
    return (y / peak * target).astype(np.float64, copy=False)
