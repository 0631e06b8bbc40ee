"""Bounded cache of processed results.

Pipeline jobs run on the Qt thread pool, so lookups and inserts can arrive
from several worker threads at once.  Keys combine a digest of the source
data URL with the settings used, which makes toggling a setting back to an
earlier value instant.  Each entry holds both the encoded JPEG and its
Base64 data URL, so the cache is bounded by entry count and by the bytes
those two take up.
"""

from __future__ import annotations

import hashlib
import logging
from collections import OrderedDict
from contextlib import contextmanager
from threading import Lock
from typing import Iterator, Optional, Tuple

from . import config
from .models import ProcessedResult, Settings

LOGGER = logging.getLogger(__name__)

CacheKey = Tuple[str, Settings]


def make_cache_key(data_url: str, settings: Settings) -> CacheKey:
    """Return the cache key for ``data_url`` processed with ``settings``."""

    digest = hashlib.md5(data_url.encode("ascii", "replace")).hexdigest()
    return digest, settings


def result_footprint(result: ProcessedResult) -> int:
    """Approximate memory held by *result*: JPEG bytes plus the data URL."""

    return len(result.jpeg_bytes) + len(result.data_url)


class ResultCache:
    """Least-recently-used map from :data:`CacheKey` to :class:`ProcessedResult`.

    Inserting evicts the oldest results until both ``max_entries`` and
    ``max_bytes`` hold.  A single result larger than ``max_bytes`` is not
    stored at all.
    """

    def __init__(
        self,
        max_entries: int = config.MAX_CACHE_SIZE,
        max_bytes: int = config.MAX_CACHE_BYTES,
    ) -> None:
        if max_entries <= 0 or max_bytes <= 0:
            raise ValueError("cache bounds must be greater than zero")
        self.max_entries = max_entries
        self.max_bytes = max_bytes
        self._results: "OrderedDict[CacheKey, ProcessedResult]" = OrderedDict()
        self._total_bytes = 0
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return self._total_bytes

    def get(self, key: CacheKey) -> Optional[ProcessedResult]:
        with self._lock:
            result = self._results.get(key)
            if result is not None:
                self._results.move_to_end(key)
            return result

    def put(self, key: CacheKey, result: ProcessedResult) -> bool:
        """Store *result*; return False if it is too large to cache."""

        size = result_footprint(result)
        if size > self.max_bytes:
            LOGGER.debug("Not caching %d byte result (limit %d)", size, self.max_bytes)
            return False
        with self._lock:
            previous = self._results.pop(key, None)
            if previous is not None:
                self._total_bytes -= result_footprint(previous)
            self._results[key] = result
            self._total_bytes += size
            while (
                len(self._results) > self.max_entries
                or self._total_bytes > self.max_bytes
            ):
                _, evicted = self._results.popitem(last=False)
                self._total_bytes -= result_footprint(evicted)
        return True

    def clear(self) -> int:
        """Drop every result and return how many bytes were released."""

        with self._lock:
            released = self._total_bytes
            self._results.clear()
            self._total_bytes = 0
        return released


_cache_lock = Lock()
_cache_instance: Optional[ResultCache] = None


def get_cache() -> ResultCache:
    """Return the shared cache, creating it on first use."""

    global _cache_instance
    with _cache_lock:
        if _cache_instance is None:
            _cache_instance = ResultCache()
        return _cache_instance


@contextmanager
def override_cache(cache: ResultCache) -> Iterator[ResultCache]:
    """Temporarily replace the shared cache within a ``with`` block."""

    global _cache_instance
    with _cache_lock:
        previous = _cache_instance
        _cache_instance = cache
    try:
        yield cache
    finally:
        with _cache_lock:
            _cache_instance = previous


__all__ = [
    "CacheKey",
    "ResultCache",
    "get_cache",
    "make_cache_key",
    "override_cache",
    "result_footprint",
]
