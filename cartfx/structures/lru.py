from __future__ import annotations

"""Fixed-capacity least-recently-used cache.

Backed by an OrderedDict kept in recency order (oldest first), so lookups,
recency promotion (move_to_end) and eviction (popitem(last=False)) are all O(1).

There is no expiry here. Callers that need staleness (RateCache) store a
timestamp alongside the value and decide for themselves.
"""
from collections import OrderedDict
from typing import Generic, Hashable, Iterator, List, Optional, TypeVar

from cartfx.core.errors import InvalidArgument

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise InvalidArgument("LRU capacity must be at least 1")
        self._capacity = capacity
        self._store: "OrderedDict[K, V]" = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> Optional[V]:
        """Return the value for key (marking it most recently used) or None."""
        if key not in self._store:
            return None
        self._store.move_to_end(key)
        return self._store[key]

    def put(self, key: K, value: V) -> None:
        if key in self._store:
            self._store[key] = value
            self._store.move_to_end(key)
            return
        if len(self._store) >= self._capacity:
            self._store.popitem(last=False)
        self._store[key] = value

    def size(self) -> int:
        return len(self._store)

    def is_empty(self) -> bool:
        return not self._store

    def clear(self) -> None:
        self._store.clear()

    def keys(self) -> List[K]:
        """Keys from most to least recently used. Does not touch recency."""
        return list(reversed(self._store))

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __iter__(self) -> Iterator[K]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"LRUCache(capacity={self._capacity}, size={len(self._store)})"
