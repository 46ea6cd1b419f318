# reverberance/core/analysis.py

"""
Summary statistics of a reverb render (RMS levels and dynamic range).
"""

import logging
from typing import Dict

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def rms(y: NDArray[np.float64]) -> float:
    """Root mean square of a signal (0.0 for an empty signal)."""
    if y.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(np.square(y))))


def compute_output_statistics(
    dry_mono: NDArray[np.float64],
    output: NDArray[np.float64]
) -> Dict[str, float]:
    """
    Computes the level statistics reported after a render.

    Args:
        dry_mono: Mono analysis signal fed to the reverb (1D).
        output: Final stereo output, shape (2, n_samples).

    Returns:
        Dictionary with 'original_rms', 'output_rms' (left channel),
        'output_peak' (across channels) and 'dynamic_range_db'
        (20*log10(peak / output_rms)). Dynamic range is +inf when the output
        RMS is zero.
    """
    original_rms = rms(np.asarray(dry_mono))
    output_rms = rms(output[0])
    peak = float(np.max(np.abs(output))) if output.size else 0.0
    if output_rms > 0.0 and peak > 0.0:
        dynamic_range_db = float(20.0 * np.log10(peak / output_rms))
    else:
        dynamic_range_db = float('inf')
    stats = {
        "original_rms": original_rms,
        "output_rms": output_rms,
        "output_peak": peak,
        "dynamic_range_db": dynamic_range_db,
    }
    logger.debug(f"Output statistics: {stats}")
    return stats
