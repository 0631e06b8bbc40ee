import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from jpeg_compressor import config
from jpeg_compressor.cache import ResultCache, make_cache_key
from jpeg_compressor.models import ProcessedResult, Settings, SourceImage
from .errors import DecodeError, EncodeError, ImageProcessingError
from .image_operations import resize_to_fit

LOGGER = logging.getLogger(__name__)

DATA_URL_PREFIX = f"data:{config.OUTPUT_MIME_TYPE};base64,"


def decode_data_url(data_url: str) -> bytes:
    """
    Return the binary payload of a Base64 data URL.

    Raises:
        DecodeError: If the string is not a well-formed Base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise DecodeError()
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError() from e


def decode_image(raw: bytes) -> Image.Image:
    """
    Decode ``raw`` into a fully loaded RGB raster.

    EXIF orientation is applied so the raster matches what an image viewer
    shows.

    Raises:
        DecodeError: If the bytes are not a loadable image
    """
    if not raw:
        raise DecodeError()
    try:
        with Image.open(BytesIO(raw)) as img:
            img.load()
            return ImageOps.exif_transpose(img).convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError() from e


def encode_jpeg(image: Image.Image, quality: float) -> bytes:
    """
    Encode ``image`` as JPEG.

    Args:
        image: Raster to encode
        quality: Quality fraction in ``(0, 1]``, mapped onto Pillow's 1..100

    Raises:
        EncodeError: If the encoder fails
    """
    pil_quality = max(1, min(100, int(round(quality * 100))))
    buffer = BytesIO()
    try:
        image.save(buffer, format="JPEG", quality=pil_quality)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Error processing image: {e}") from e
    data = buffer.getvalue()
    if not data:
        raise EncodeError()
    return data


def to_data_url(jpeg_bytes: bytes) -> str:
    """Wrap JPEG bytes in a ``data:image/jpeg;base64,`` URL."""
    return DATA_URL_PREFIX + base64.b64encode(jpeg_bytes).decode("ascii")


class ImageProcessor:
    """Runs decode -> resize -> encode with optional result caching."""

    def __init__(self, cache: Optional[ResultCache] = None):
        self._cache = cache

    def process(self, source: Union[SourceImage, str], settings: Settings) -> ProcessedResult:
        """
        Produce the resized, re-encoded result for ``source``.

        Args:
            source: Loaded source image or its data URL
            settings: Quality and size bounds to apply

        Returns:
            ProcessedResult: Encoded data URL and final dimensions

        Raises:
            DecodeError: If the source cannot be decoded
            EncodeError: If the resized raster cannot be encoded
        """
        data_url = source.data_url if isinstance(source, SourceImage) else source

        cache_key = None
        if self._cache is not None:
            cache_key = make_cache_key(data_url, settings)
            cached = self._cache.get(cache_key)
            if cached is not None:
                LOGGER.debug("Result cache hit for %sx%s", cached.width, cached.height)
                return cached

        image = decode_image(decode_data_url(data_url))
        source_size = image.size
        resized = resize_to_fit(image, settings.max_width, settings.max_height)
        jpeg_bytes = encode_jpeg(resized, settings.quality)
        result = ProcessedResult(
            data_url=to_data_url(jpeg_bytes),
            width=resized.width,
            height=resized.height,
            jpeg_bytes=jpeg_bytes,
            source_size=source_size,
        )
        LOGGER.info(
            "Processed %sx%s -> %sx%s at quality %.2f (%d chars)",
            source_size[0], source_size[1], result.width, result.height,
            settings.quality, result.encoded_length,
        )

        if cache_key is not None and self._cache.put(cache_key, result):
            LOGGER.debug("Cached result; cache now holds %d bytes", self._cache.total_bytes)
        return result


@dataclass(frozen=True, slots=True)
class ProcessingRequest:
    """One sequence-tagged request to process ``source`` with ``settings``."""
    request_id: int
    source: SourceImage
    settings: Settings


@dataclass(frozen=True, slots=True)
class ProcessingSuccess:
    request_id: int
    result: ProcessedResult


@dataclass(frozen=True, slots=True)
class ProcessingFailure:
    request_id: int
    error: ImageProcessingError

    @property
    def message(self) -> str:
        return self.error.message


ProcessingOutcome = Union[ProcessingSuccess, ProcessingFailure]


def run_pipeline(request: ProcessingRequest, processor: Optional[ImageProcessor] = None) -> ProcessingOutcome:
    """Process ``request`` and report success or a typed failure.

    Pipeline errors never escape; anything else propagates to the caller.
    """
    processor = processor or ImageProcessor()
    try:
        result = processor.process(request.source, request.settings)
    except ImageProcessingError as e:
        LOGGER.warning("Request %d failed: %s", request.request_id, e)
        return ProcessingFailure(request.request_id, e)
    return ProcessingSuccess(request.request_id, result)


__all__ = [
    "DATA_URL_PREFIX",
    "ImageProcessor",
    "ProcessingFailure",
    "ProcessingOutcome",
    "ProcessingRequest",
    "ProcessingSuccess",
    "decode_data_url",
    "decode_image",
    "encode_jpeg",
    "run_pipeline",
    "to_data_url",
]
