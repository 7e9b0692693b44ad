"""Fingerprints, ETag digests and the in-memory LRU image cache."""

import hashlib
import threading
from collections import OrderedDict
from enum import Enum

from loguru import logger


def _field(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def fingerprint(kind: str, *fields: object) -> str:
    """Build the cache key for a request.

    Fields are joined in the order given, so callers must always pass them
    in the same order. Booleans are written as ``true``/``false``.
    """
    return ":".join([kind, *(_field(value) for value in fields)])


def digest(key: str) -> str:
    """Quoted ETag for ``key``. Used for equality only, not as a security boundary."""
    return f'"{hashlib.md5(key.encode(), usedforsecurity=False).hexdigest()}"'


class ImageCache:
    """Thread-safe LRU cache of rendered image bytes.

    Uses OrderedDict for O(1) LRU operations; a hit moves the entry to the
    most recently used end.
    """

    def __init__(self, max_size: int = 2000) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be greater than zero")
        self._cache: OrderedDict[str, bytes] = OrderedDict()
        self._max_size = max_size
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> bytes | None:
        with self._lock:
            data = self._cache.get(key)
            if data is not None:
                self._cache.move_to_end(key)
            return data

    def put(self, key: str, data: bytes) -> None:
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = data
            while len(self._cache) > self._max_size:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f"Evicted {evicted[:40]} from image cache")

    def __contains__(self, key: str) -> bool:
        """Check membership without updating LRU order."""
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
