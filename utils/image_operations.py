"""Geometry and resampling helpers for the resize step.

The target size is computed with a sequential clamp: the width bound is
applied first, then the height bound is checked against the possibly already
shrunk width.  For extreme aspect ratios this can leave one side below its
bound while the other sits exactly on it; the clamp never iterates towards a
tighter fit.
"""

from __future__ import annotations

import logging
import math

from PIL import Image

LOGGER = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.BILINEAR


def _round_half_up(value: float) -> int:
    """Round positive ``value`` to the nearest integer, halves going up."""

    return int(math.floor(value + 0.5))


def calculate_target_size(
    width: int, height: int, max_width: int, max_height: int
) -> tuple[int, int]:
    """Return the ``(width, height)`` that fits ``max_width`` x ``max_height``.

    ``height`` must be positive.  Sizes already within both bounds are
    returned unchanged; the result is never smaller than 1x1.
    """

    if height <= 0:
        raise ValueError("height must be greater than zero")

    aspect_ratio = width / height
    target_width: float = width
    target_height: float = height

    if target_width > max_width:
        target_width = max_width
        target_height = target_width / aspect_ratio
    if target_height > max_height:
        target_height = max_height
        target_width = target_height * aspect_ratio

    final_width = max(1, _round_half_up(target_width))
    final_height = max(1, _round_half_up(target_height))
    return final_width, final_height


def resize_to_fit(image: Image.Image, max_width: int, max_height: int) -> Image.Image:
    """Return a copy of ``image`` scaled to fit within the given bounds."""

    size = calculate_target_size(image.width, image.height, max_width, max_height)
    if size == image.size:
        return image.copy()
    LOGGER.debug("Resampling %sx%s -> %sx%s", image.width, image.height, *size)
    return image.resize(size, RESAMPLE)


__all__ = [
    "RESAMPLE",
    "calculate_target_size",
    "resize_to_fit",
]
