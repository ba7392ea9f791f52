"""Cache of already segmented chunks."""

import threading
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheInfo:
    """Usage counters of a :obj:`ChunkCache`."""

    hits: int
    misses: int
    size: int


class ChunkCache(Generic[V]):
    """Thread-safe mapping from ``(version, chunk)`` to a segmentation.

    Entries are never evicted: the cache grows for as long as the version
    does not change. Storing a value under a newer version than the one seen
    so far drops every older entry, since those can no longer be hit.
    Values must be immutable, as the same object is handed to every caller.
    """

    def __init__(self):
        self._entries: Dict[Tuple[int, Hashable], V] = {}
        self._lock = threading.Lock()
        self._version = 0
        self._hits = 0
        self._misses = 0

    def get(self, version: int, chunk: Hashable) -> Optional[V]:
        with self._lock:
            value = self._entries.get((version, chunk))
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def set(self, version: int, chunk: Hashable, value: V):
        with self._lock:
            if version > self._version:
                self._entries.clear()
                self._version = version
            elif version < self._version:
                # Computed with outdated rules.
                return
            self._entries[(version, chunk)] = value

    def clear(self):
        with self._lock:
            self._entries.clear()

    def info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(self._hits, self._misses, len(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
