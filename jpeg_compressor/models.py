"""Value objects shared by the ingestion, pipeline and UI layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from . import config


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _coerce_dimension(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = 0
    return max(config.MIN_DIMENSION, min(config.MAX_DIMENSION, number or 1))


def _coerce_quality(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = config.DEFAULT_QUALITY
    number = _clamp(number, config.QUALITY_MIN, config.QUALITY_MAX)
    steps = round(number / config.QUALITY_STEP)
    return round(_clamp(steps * config.QUALITY_STEP, config.QUALITY_MIN, config.QUALITY_MAX), 2)


@dataclass(frozen=True)
class Settings:
    """Resize and encode settings chosen by the user.

    Attributes:
        quality (float): JPEG quality as a fraction in ``(0, 1]``
        max_width (int): Largest allowed output width in pixels
        max_height (int): Largest allowed output height in pixels
    """

    quality: float = config.DEFAULT_QUALITY
    max_width: int = config.DEFAULT_MAX_WIDTH
    max_height: int = config.DEFAULT_MAX_HEIGHT

    def __post_init__(self) -> None:
        if not 0 < self.quality <= 1:
            raise ValueError("quality must be in (0, 1]")
        if self.max_width < 1 or self.max_height < 1:
            raise ValueError("max_width and max_height must be at least 1")

    @classmethod
    def sanitized(cls, quality: Any, max_width: Any, max_height: Any) -> "Settings":
        """Build settings from raw input, clamping each field into range."""

        return cls(
            quality=_coerce_quality(quality),
            max_width=_coerce_dimension(max_width),
            max_height=_coerce_dimension(max_height),
        )


@dataclass(frozen=True)
class SourceImage:
    """The originally loaded file, kept as a data URL."""

    data_url: str
    file_name: str
    mime_type: str = config.OUTPUT_MIME_TYPE
    byte_size: int = 0


@dataclass(frozen=True)
class ProcessedResult:
    """Output of one resize/encode run."""

    data_url: str
    width: int
    height: int
    jpeg_bytes: bytes = field(repr=False, default=b"")
    source_size: Optional[Tuple[int, int]] = None

    @property
    def encoded_length(self) -> int:
        return len(self.data_url)

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class ProcessingState:
    """Snapshot of everything the window renders."""

    settings: Settings = field(default_factory=Settings)
    source: Optional[SourceImage] = None
    result: Optional[ProcessedResult] = None
    error: Optional[str] = None
    busy: bool = False


__all__ = [
    "ProcessedResult",
    "ProcessingState",
    "Settings",
    "SourceImage",
]
