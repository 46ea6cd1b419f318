# reverberance/utils/__init__.py

"""Utility modules (logging setup)."""
