# reverberance/core/audio/effects/impulse.py

"""
Synthesis of a room impulse response (IR) from perceptual reverb parameters.

The IR is assembled from four parts, all summed into one buffer whose length
equals the decay time:

1. A negligible direct-path spike at sample 0 (the dry path is mixed in later).
2. A pre-delay reflection marking the onset of audible reflections.
3. Randomly placed early reflections whose spread scales with the room size.
4. A damped, exponentially decaying noise tail for the late reverberation.

All randomness comes from a single `numpy.random.Generator` passed in by the
caller, so a seeded generator yields a reproducible IR.
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray
from scipy.signal import lfilter

from reverberance.config.models import ReverbParameters, validate_for_sample_rate

logger = logging.getLogger(__name__)

DIRECT_PATH_GAIN = 0.001
PRE_DELAY_GAIN = 0.1
# Early reflections spread over [0, room_size * MAX_DELAY_PER_ROOM * EARLY_SPREAD] seconds
MAX_DELAY_PER_ROOM = 0.2
EARLY_SPREAD = 0.3
EARLY_DECAY_RATE = 2.0
LATE_ONSET_SECONDS = 0.08
# ln(1000): the envelope reaches -60 dB at the decay time
RT60_CONSTANT = 6.91
LATE_GAIN = 0.1
DAMPING_FEEDBACK = 0.3


def _resolve_rng(rng: Optional[np.random.Generator], seed: Optional[int]) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def damp_noise(noise: NDArray[np.float64], damping: float) -> NDArray[np.float64]:
    """
    Applies the one-pole smoothing recurrence to a noise sequence.

    n[i] = n[i] * (1 - damping) + n[i-1] * damping * 0.3, run sequentially so
    that n[i-1] is the already smoothed value; n[0] is left untouched. Higher
    damping darkens the noise.

    Returns:
        New smoothed array; the input is not modified.
    """
    if damping <= 0.0 or noise.size < 2:
        return noise.copy()
    feedback = damping * DAMPING_FEEDBACK
    out = np.empty_like(noise)
    out[0] = noise[0]
    # First-order IIR with initial state chosen so y[0] continues from noise[0]
    out[1:], _ = lfilter([1.0 - damping], [1.0, -feedback], noise[1:], zi=[feedback * noise[0]])
    return out


def synthesize_impulse_response(
    params: ReverbParameters,
    sample_rate: int,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    normalize: bool = True
) -> NDArray[np.float64]:
    """
    Builds a reverberation impulse response.

    Args:
        params: Reverb parameters (room size, pre-delay, decay, damping,
                reverberation amount, early reflection count and gain are used).
        sample_rate: Sampling rate (Hz, positive integer).
        rng: Random generator supplying the early reflection placement and the
             tail noise. Takes precedence over `seed`.
        seed: Seed for a fresh generator when `rng` is not given.
        normalize: If True (default), scale so the peak absolute value is 1.
                   If False, return the raw un-normalized sum (useful for
                   inspecting the component gains).

    Returns:
        1D float64 array of length round(decay_time_seconds * sample_rate).

    Raises:
        InvalidParameterError: If the sample rate is invalid or the decay time
                               is shorter than one sample.

    Example:
        >>> ir = synthesize_impulse_response(ReverbParameters(), 44100, seed=0)
        >>> len(ir)
        110250
    """
    validate_for_sample_rate(params, sample_rate)
    generator = _resolve_rng(rng, seed)

    length = int(round(params.decay_time_seconds * sample_rate))
    logger.info(f"Synthesizing impulse response: length={length} samples, room_size={params.room_size}, "
                f"decay={params.decay_time_seconds}s, damping={params.damping}, reverberation={params.reverberation}")

    ir = np.zeros(length, dtype=np.float64)
    ir[0] = DIRECT_PATH_GAIN

    # Pre-delay reflection
    pre_delay_samples = int(round(params.pre_delay_seconds * sample_rate))
    if 0 < pre_delay_samples < length:
        ir[pre_delay_samples] = PRE_DELAY_GAIN
    else:
        logger.debug(f"Pre-delay index {pre_delay_samples} outside (0, {length}); no pre-delay reflection.")

    # Early reflections
    n_early = params.num_early_reflections
    if n_early > 0:
        max_early_delay = params.room_size * MAX_DELAY_PER_ROOM * EARLY_SPREAD
        early_delays = np.sort(generator.random(n_early) * max_early_delay)
        early_gains = params.early_reflection_gain * (0.5 + 0.5 * generator.random(n_early)) * params.reverberation
        early_gains = early_gains * np.exp(-early_delays * EARLY_DECAY_RATE)

        early_idx = np.round(early_delays * sample_rate).astype(np.int64) + pre_delay_samples
        in_range = early_idx < length
        if not np.all(in_range):
            logger.debug(f"Dropping {np.count_nonzero(~in_range)} early reflections beyond the IR length.")
        # Colliding reflections accumulate
        np.add.at(ir, early_idx[in_range], early_gains[in_range])

    # Late reverberation tail
    late_start = int(round(LATE_ONSET_SECONDS * sample_rate))
    if late_start < length:
        time_vector = np.arange(late_start, length, dtype=np.float64) / sample_rate
        noise = generator.standard_normal(length - late_start)
        noise = damp_noise(noise, params.damping)
        envelope = np.exp(-time_vector * RT60_CONSTANT / params.decay_time_seconds)
        ir[late_start:] += noise * envelope * LATE_GAIN * params.reverberation
    else:
        logger.debug(f"Late reverberation onset ({late_start}) beyond IR length ({length}); tail omitted.")

    if not normalize:
        return ir

    peak = np.max(np.abs(ir))
    if peak == 0.0:
        logger.warning("Synthesized impulse response is silent; substituting a unit impulse.")
        unit = np.zeros(length, dtype=np.float64)
        unit[0] = 1.0
        return unit
    return ir / peak
