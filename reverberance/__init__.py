# reverberance/__init__.py

"""
Reverberance: synthetic room reverberation for finite audio recordings.

Synthesizes an impulse response from perceptual room parameters, convolves it
with the dry signal, shapes the tone of the wet signal, widens it to stereo and
mixes it against the dry signal.
"""

from .version import __version__
from .errors import ReverbError, InvalidParameterError, LengthMismatchError
from .config.models import ReverbParameters
from .core.buffer import AudioBuffer, prepare_signal
from .core.pipeline import render_reverb, ReverbResult

__all__ = [
    "__version__",
    "ReverbError",
    "InvalidParameterError",
    "LengthMismatchError",
    "ReverbParameters",
    "AudioBuffer",
    "prepare_signal",
    "render_reverb",
    "ReverbResult",
]
