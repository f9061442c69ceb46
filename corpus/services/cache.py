"""Small TTL cache with LRU eviction, used to hold loaded corpora."""

import time
from collections import OrderedDict
from typing import Any


class TTLCache:
    """In-memory cache with time-to-live and max-size eviction.

    Usage::

        cache = TTLCache(ttl=60, max_size=4)
        cache.set("content", corpus)
        hit = cache.get("content")  # corpus, or None once expired/evicted
    """

    def __init__(self, ttl: float = 60, max_size: int = 4) -> None:
        self._ttl = ttl
        self._max_size = max_size
        # Insertion order doubles as recency order
        self._store: OrderedDict[str, tuple[Any, float]] = OrderedDict()

    def get(self, key: str) -> Any | None:
        """Return the cached value if present and fresh, else None.

        Expired entries are dropped on read.
        """
        entry = self._store.get(key)
        if entry is None:
            return None
        value, ts = entry
        if time.monotonic() - ts > self._ttl:
            del self._store[key]
            return None
        self._store.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, evicting the least recently used entry if full."""
        if key in self._store:
            self._store.move_to_end(key)
        self._store[key] = (value, time.monotonic())
        while len(self._store) > self._max_size:
            self._store.popitem(last=False)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
