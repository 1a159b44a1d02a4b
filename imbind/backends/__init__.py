"""Imaging engine backends."""

from imbind.backends.pillow_engine import PillowImagingEngine as Engine

__all__ = ["Engine"]
