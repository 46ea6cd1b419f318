# reverberance/errors.py

"""
Exception hierarchy for the reverberation pipeline.

Both concrete errors also derive from ValueError, so callers catching the
usual numeric-argument errors keep working.
"""


class ReverbError(Exception):
    """Base class for all errors raised by reverberance."""


class InvalidParameterError(ReverbError, ValueError):
    """A parameter lies outside its declared domain."""


class LengthMismatchError(ReverbError, ValueError):
    """Channel buffers handed across a stage boundary differ in length."""
