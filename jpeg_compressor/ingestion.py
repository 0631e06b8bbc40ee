"""File ingestion: MIME validation and reading a file into a data URL."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from utils.errors import ReadError
from utils.validation import guess_mime_type, validate_image_path, validate_mime_type

from .models import SourceImage

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileCandidate:
    """A file the user picked or dropped, before it has been read."""

    path: Path
    name: str
    mime_type: str

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileCandidate":
        """Describe *path*, deriving the MIME type from its file name."""

        p = Path(str(path))
        return cls(path=p, name=p.name, mime_type=guess_mime_type(p))


def read_source(candidate: FileCandidate) -> SourceImage:
    """Read *candidate* in full and return it as a :class:`SourceImage`.

    The MIME type is checked again so the function is safe to call on its
    own; :class:`~utils.errors.UnsupportedTypeError` and
    :class:`~utils.errors.ReadError` propagate to the caller.
    """

    mime_type = validate_mime_type(candidate.mime_type).lower()
    path = validate_image_path(candidate.path)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        LOGGER.warning("Could not read %s: %s", path, exc)
        raise ReadError() from exc
    if not raw:
        raise ReadError("Failed to read file content.")

    payload = base64.b64encode(raw).decode("ascii")
    LOGGER.info("Read %s (%d bytes)", candidate.name, len(raw))
    return SourceImage(
        data_url=f"data:{mime_type};base64,{payload}",
        file_name=candidate.name,
        mime_type=mime_type,
        byte_size=len(raw),
    )


__all__ = ["FileCandidate", "read_source"]
