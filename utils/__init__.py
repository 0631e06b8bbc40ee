"""Pillow-side helpers for the JPEG compressor."""

from . import errors, image_operations, image_processor, validation

__all__ = ["errors", "image_operations", "image_processor", "validation"]
