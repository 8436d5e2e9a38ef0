"""Thread-safe bounded LRU cache with a loader function.

The loader runs outside the lock: threads racing on the same missing key may
each compute the value, and the last write wins. Callers must therefore only
use loaders that are pure functions of the key.

A loader may return None; None is cached like any other value, so a
confirmed miss is not recomputed. Whether a key has been computed at all is
told by key presence, never by the stored value.

Example:
    >>> cache = ConcurrentLruCache(2, lambda key: key * 2)
    >>> cache.get(3)
    6
    >>> cache.contains(3)
    True
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ConcurrentLruCache(Generic[K, V]):
    """Bounded least-recently-used cache safe for concurrent use.

    Attributes:
        capacity: Maximum number of entries kept.
    """

    def __init__(self, capacity: int, loader: Callable[[K], V]) -> None:
        """Initialize the cache.

        Args:
            capacity: Maximum number of entries, must be positive.
            loader: Function computing the value for a missing key.

        Raises:
            ValueError: If capacity is not positive.
        """
        if capacity <= 0:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._loader = loader
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> V:
        """Return the cached value for key, loading it on a miss.

        Args:
            key: Cache key.

        Returns:
            The cached or freshly loaded value.
        """
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self._hits += 1
                return self._entries[key]
            self._misses += 1

        value = self._loader(key)

        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)
        return value

    def contains(self, key: K) -> bool:
        """Check presence without touching recency."""
        with self._lock:
            return key in self._entries

    def remove(self, key: K) -> bool:
        """Remove an entry.

        Returns:
            True if the entry was present.
        """
        with self._lock:
            return self._entries.pop(key, _ABSENT) is not _ABSENT

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def keys(self) -> list[K]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def info(self) -> dict[str, int]:
        """Snapshot of capacity, size and hit/miss counters for debugging."""
        with self._lock:
            return {
                "capacity": self._capacity,
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"ConcurrentLruCache(capacity={self._capacity}, size={len(self)})"


_ABSENT = object()
