# reverberance/core/__init__.py

"""
Core Processing Package for reverberance.

Contains modules for:
- Audio buffers and signal preparation
- Butterworth filters used for tone shaping
- Reverb stages and audio file I/O (audio subpackage)
- The end-to-end pipeline
- Output statistics
"""

from . import buffer
from . import filters
from . import audio
from . import pipeline
from . import analysis

__all__ = [
    "buffer",
    "filters",
    "audio",
    "pipeline",
    "analysis",
]
