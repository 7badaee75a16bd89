"""Plasma fractal texture generator."""
__version__ = "1.0.0"
