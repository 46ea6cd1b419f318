# reverberance/core/pipeline.py

"""
End-to-end reverberation pipeline.

Runs the stages strictly in order on an in-memory buffer:
preparation -> impulse response -> convolution -> tone -> stereo -> mix.
Each stage returns a new array; no caller-visible buffer is modified.
"""

import logging
from typing import NamedTuple, Optional

import numpy as np
from numpy.typing import NDArray

from reverberance.config.models import ReverbParameters, validate_for_sample_rate
from reverberance.core.buffer import AudioBuffer, PreparedSignal, prepare_signal, DEFAULT_MAX_DURATION
from reverberance.core.audio.effects import (
    synthesize_impulse_response,
    apply_convolution_reverb,
    shape_tone,
    widen_stereo,
    mix_dry_wet,
)

logger = logging.getLogger(__name__)


class ReverbResult(NamedTuple):
    """Final output plus the intermediate products of a render."""
    output: AudioBuffer
    wet: AudioBuffer
    impulse_response: NDArray[np.float64]
    prepared: PreparedSignal


def stereo_engaged(params: ReverbParameters, is_stereo: bool) -> bool:
    """
    Whether the wet signal gets widened.

    A mono recording with zero width keeps the plain duplicated wet signal
    instead of the delayed mid sum.
    """
    return params.enable_stereo and (is_stereo or params.stereo_width > 0)


def render_reverb(
    buffer: AudioBuffer,
    params: ReverbParameters,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    max_duration: Optional[float] = DEFAULT_MAX_DURATION
) -> ReverbResult:
    """
    Adds synthetic room reverberation to an audio buffer.

    Args:
        buffer: Decoded input audio (mono or stereo).
        params: Reverb parameters.
        seed: Seed for the impulse response generator (ignored if `rng` is given).
        rng: Explicit random generator for impulse response synthesis.
        max_duration: Analysis window in seconds (default 20.0, None for all).

    Returns:
        ReverbResult with the stereo output buffer (peak 0.95 unless silent),
        the stereo wet buffer, the normalized impulse response and the
        prepared input.

    Raises:
        InvalidParameterError: For parameters outside their domain.
    """
    validate_for_sample_rate(params, buffer.sample_rate)
    sr = buffer.sample_rate
    logger.info(f"Rendering reverb for {buffer!r}")

    prepared = prepare_signal(buffer, max_duration=max_duration)

    ir = synthesize_impulse_response(params, sr, rng=rng, seed=seed)
    wet_mono = apply_convolution_reverb(prepared.mono, ir)
    wet_mono = shape_tone(wet_mono, params.low_tone, params.high_tone, sr)

    enabled = stereo_engaged(params, prepared.is_stereo)
    wet_left, wet_right = widen_stereo(wet_mono, params.stereo_width, enabled, sr)
    wet = np.stack([wet_left, wet_right], axis=0)

    output = mix_dry_wet(prepared.dry, wet, params.dry_level, params.wet_level)
    logger.info(f"Reverb render complete: {output.shape[1]} samples per channel.")

    return ReverbResult(
        output=AudioBuffer(output, sr),
        wet=AudioBuffer(wet, sr),
        impulse_response=ir,
        prepared=prepared,
    )
