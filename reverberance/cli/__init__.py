# reverberance/cli/__init__.py

"""Command-line interface for reverberance."""

from .main import cli

__all__ = ["cli"]
