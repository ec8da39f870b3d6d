from __future__ import annotations

import threading
from typing import Optional

from cachetools import LRUCache

from .models import HistoricalEvent


def normalise_query(query: str) -> str:
    return query.strip().lower()


class SynthesisCache:
    """Thread-safe LRU cache of synthesised learning units.

    Keys are normalised queries. Once ``capacity`` entries are held, storing
    a new key evicts the least recently used one.
    """

    def __init__(self, capacity: int = 256):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: LRUCache = LRUCache(maxsize=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return int(self._entries.maxsize)

    def get(self, key: str) -> Optional[HistoricalEvent]:
        # LRUCache.get marks the key as recently used.
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, event: HistoricalEvent) -> None:
        # Concurrent misses for the same key may both land here; last write wins.
        with self._lock:
            self._entries[key] = event

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
