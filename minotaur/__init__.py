"""Bitmap and distance-field filters that turn grayscale images into plotter paths."""

__version__ = "0.1.0"