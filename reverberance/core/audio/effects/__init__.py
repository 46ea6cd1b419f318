# reverberance/core/audio/effects/__init__.py

"""
Reverb Stages Subpackage.

Contains the stages of the reverberation pipeline: impulse response
synthesis, convolution, tone shaping, stereo widening and dry/wet mixing,
plus the peak normalization helper they share.
"""

from .impulse import synthesize_impulse_response, damp_noise
from .convolution import apply_convolution_reverb
from .tone import shape_tone
from .stereo import widen_stereo, delay_signal
from .mixer import mix_dry_wet
from .utility import normalize_peak, peak_of


__all__ = [
    "synthesize_impulse_response",
    "damp_noise",
    "apply_convolution_reverb",
    "shape_tone",
    "widen_stereo",
    "delay_signal",
    "mix_dry_wet",
    "normalize_peak",
    "peak_of",
]
