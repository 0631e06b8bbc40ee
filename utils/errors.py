"""Error types raised by the ingestion and image pipeline helpers."""
from __future__ import annotations

from typing import Optional


class ImageProcessingError(Exception):
    """Base class for every failure the pipeline reports to the user."""

    default_message = "Error processing image."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class UnsupportedTypeError(ImageProcessingError):
    """Raised when the selected file is not a JPEG."""

    default_message = "Please select or drop a JPG/JPEG image file."


class ReadError(ImageProcessingError):
    """Raised when the file content could not be read."""

    default_message = "Failed to read the file."


class DecodeError(ImageProcessingError):
    """Raised when the source bytes are not a loadable image."""

    default_message = "Failed to load the image data for processing."


class EncodeError(ImageProcessingError):
    """Raised when the resized raster could not be re-encoded as JPEG."""

    default_message = "Error processing image: could not encode JPEG."


__all__ = [
    "DecodeError",
    "EncodeError",
    "ImageProcessingError",
    "ReadError",
    "UnsupportedTypeError",
]
