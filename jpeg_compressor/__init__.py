"""Resize JPEG images and expose them as Base64 data URLs."""

__version__ = "1.0.0"
