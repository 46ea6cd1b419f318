# reverberance/config/__init__.py

"""
Configuration management for reverberance.

This package handles loading configuration from files (TOML),
environment variables, and internal defaults, providing a unified
configuration object and the immutable reverb parameter model.
"""

from .models import ReverberanceConfig, ReverbParameters, validate_for_sample_rate
from .loaders import load_configuration

__all__ = [
    "ReverberanceConfig",
    "ReverbParameters",
    "validate_for_sample_rate",
    "load_configuration",
]
