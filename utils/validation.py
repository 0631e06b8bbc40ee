"""Input validation helpers for secure file handling."""
from __future__ import annotations

import mimetypes
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

from .errors import ReadError, UnsupportedTypeError

JPEG_MIME_PATTERN = re.compile(r"^image/jpe?g$", re.IGNORECASE)

# mimetypes has no entry for the non-standard "image/jpg" alias
_EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".jpe": "image/jpeg",
}


def _has_url_scheme(path_str: str) -> bool:
    """Return True if *path_str* looks like a URL with a scheme.

    Single-letter schemes such as ``"C"`` are treated as drive letters on
    Windows and therefore ignored.
    """
    parsed = urlparse(path_str)
    return bool(parsed.scheme and len(parsed.scheme) > 1)


def is_jpeg_mime_type(mime_type: Optional[str]) -> bool:
    """Return True for ``image/jpeg`` or ``image/jpg`` in any letter case."""
    return bool(mime_type) and JPEG_MIME_PATTERN.match(mime_type) is not None


def validate_mime_type(mime_type: Optional[str]) -> str:
    """Return *mime_type* unchanged or raise :class:`UnsupportedTypeError`."""
    if not is_jpeg_mime_type(mime_type):
        raise UnsupportedTypeError()
    return mime_type


def guess_mime_type(path: Union[str, Path]) -> str:
    """Best-effort MIME type of *path* based on its file name.

    Returns ``"application/octet-stream"`` when nothing better is known.
    """
    suffix = Path(str(path)).suffix.lower()
    if suffix in _EXTENSION_MIME_TYPES:
        return _EXTENSION_MIME_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(str(path), strict=False)
    return guessed or "application/octet-stream"


def validate_image_path(path: Union[str, Path]) -> Path:
    """Validate a user-supplied image *path*.

    The path must point to an existing file and must not include a URL
    scheme.  Returns the resolved ``Path`` object; failures raise
    :class:`ReadError` so callers can surface them like any other read
    failure.
    """
    path_str = str(path)
    if _has_url_scheme(path_str):
        raise ReadError("URLs are not allowed")

    p = Path(path_str).expanduser()
    try:
        p = p.resolve(strict=True)
    except (FileNotFoundError, OSError) as exc:
        raise ReadError(f"File does not exist: {path_str}") from exc

    if not p.is_file():
        raise ReadError(f"Not a file: {path_str}")

    return p
