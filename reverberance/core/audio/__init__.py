# reverberance/core/audio/__init__.py

"""
Core Audio Processing Package.

Contains the reverb stage implementations and audio file input/output.
"""

from . import io
from . import effects

__all__ = [
    "io",
    "effects",
]
