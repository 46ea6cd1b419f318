# reverberance/core/filters.py

"""
Butterworth filter design and application used by the tone shaping stage.

Filters are designed with scipy.signal in Second-Order Sections (SOS) form for
numerical stability and applied causally in a single forward pass, the
behaviour of a classic IIR difference equation.
"""

import logging
from typing import Literal

import numpy as np
from numpy.typing import NDArray
from scipy.signal import butter, sosfilt

from reverberance.errors import InvalidParameterError

logger = logging.getLogger(__name__)

FilterType = Literal['lowpass', 'highpass']

# --- Filter Design & Application (using SOS) ---

def design_butterworth_sos(
    cutoff: float,
    fs: float,
    order: int,
    filter_type: FilterType
) -> NDArray[np.float64]:
    """
    Designs a Butterworth IIR filter and returns it in Second-Order Sections (SOS) format.

    Args:
        cutoff: The cutoff frequency (in Hz).
        fs: The sampling frequency of the signal (in Hz).
        order: The order of the filter (positive integer).
        filter_type: Type of filter: 'lowpass' or 'highpass'.

    Returns:
        SOS representation of the filter coefficients (NumPy array, float64),
        shape (n_sections, 6).

    Raises:
        InvalidParameterError: If the cutoff is not strictly between 0 and Nyquist,
                               the order is not positive, or the type is unknown.
    """
    nyquist = 0.5 * fs
    if not 0 < cutoff < nyquist:
        raise InvalidParameterError(
            f"Cutoff frequency ({cutoff} Hz) must be strictly between 0 and Nyquist ({nyquist} Hz)."
        )
    if order < 1:
        raise InvalidParameterError(f"Filter order must be positive, got {order}.")
    if filter_type not in ('lowpass', 'highpass'):
        raise InvalidParameterError(f"Unsupported filter type '{filter_type}'.")

    normal_cutoff = cutoff / nyquist
    logger.debug(f"Designing {order}-order Butterworth {filter_type} filter. "
                 f"Cutoff: {cutoff} Hz, Fs: {fs} Hz, Normalized Cutoff: {normal_cutoff:.5f}")

    sos = butter(order, normal_cutoff, btype=filter_type, analog=False, output='sos')
    return sos.astype(np.float64, copy=False)

def apply_sos_filter(
    sos: NDArray[np.float64],
    data: NDArray[np.float64]
) -> NDArray[np.float64]:
    """
    Applies a filter in SOS format to a 1D signal.

    Args:
        sos: Filter coefficients in Second-Order Sections format.
        data: The input signal (1D NumPy array of float64).

    Returns:
        The filtered signal (new 1D NumPy array, float64).

    Raises:
        InvalidParameterError: If data is not 1D or sos has the wrong shape.
    """
    if data.ndim != 1:
        raise InvalidParameterError("Input data for filtering must be a 1D array.")
    if sos.ndim != 2 or sos.shape[1] != 6:
        raise InvalidParameterError("Input sos must be a 2D array with shape (n_sections, 6).")
    if data.size == 0:
        return np.zeros(0, dtype=np.float64)

    logger.debug(f"Applying SOS filter with {sos.shape[0]} sections.")
    return np.asarray(sosfilt(sos, data), dtype=np.float64)

# --- Convenience Filter Functions ---

def low_pass_filter(
    data: NDArray[np.float64],
    cutoff: float,
    fs: float,
    order: int = 2
) -> NDArray[np.float64]:
    """Applies a low-pass Butterworth filter."""
    logger.debug(f"Applying low-pass filter: cutoff={cutoff} Hz, order={order}")
    sos = design_butterworth_sos(cutoff, fs, order, 'lowpass')
    return apply_sos_filter(sos, data)

def high_pass_filter(
    data: NDArray[np.float64],
    cutoff: float,
    fs: float,
    order: int = 2
) -> NDArray[np.float64]:
    """Applies a high-pass Butterworth filter."""
    logger.debug(f"Applying high-pass filter: cutoff={cutoff} Hz, order={order}")
    sos = design_butterworth_sos(cutoff, fs, order, 'highpass')
    return apply_sos_filter(sos, data)
