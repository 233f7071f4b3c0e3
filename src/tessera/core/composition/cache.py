"""Composition result cache.

Results are memoised by a fingerprint of the request: the SHA-256 of its
canonical JSON form. Entries expire after ``ttl_seconds`` and the least
recently used entry is evicted once ``max_entries`` is reached.
"""
from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from .models import CompositionRequest, CompositionResult

logger = logging.getLogger(__name__)


def request_fingerprint(request: CompositionRequest) -> str:
    canonical = json.dumps(request.to_dict(), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class CompositionCache:
    """Thread-safe LRU cache with a time-to-live per entry."""

    def __init__(
        self,
        *,
        max_entries: int = 256,
        ttl_seconds: Optional[float] = 3600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, CompositionResult]]" = OrderedDict()
        self._lock = threading.Lock()

    fingerprint = staticmethod(request_fingerprint)

    def get(self, key: str) -> Optional[CompositionResult]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, result = entry
            if self.ttl_seconds is not None and self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("Composition cache entry expired: %s", key[:12])
                return None
            self._entries.move_to_end(key)
            return result

    def set(self, key: str, result: CompositionResult) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), result)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Composition cache evicted: %s", evicted[:12])

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["CompositionCache", "request_fingerprint"]
