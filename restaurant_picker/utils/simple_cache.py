"""In-memory TTL cache for public reads.

Readers may see the document up to ``ttl_seconds`` old; the catalog service
clears the cache after each successful write in this process. Other
instances keep their own copy and expire it on their own.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheItem:
    value: Any
    expires_at: float


class SimpleTTLCache:
    """Thread-safe TTL cache with LRU eviction.

    Values are deep-copied on the way in and out so callers can mutate what
    they get back without touching the cached copy.

    Attributes:
        ttl_seconds: Time-to-live applied to all entries (0 disables caching).
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        ttl_seconds: float = 30,
        max_entries: int | None = 16,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem] = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def get(self, key: str) -> Any | None:
        """Return a copy of the cached value, or None if missing/expired."""

        with self._lock:
            item = self._store.get(key)
            if item is None or self._clock() >= item.expires_at:
                self._store.pop(key, None)
                logger.debug("cache.miss", extra={"cache_key": key})
                return None

            self._store.move_to_end(key)
            logger.debug("cache.hit", extra={"cache_key": key})
            return copy.deepcopy(item.value)

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return

        with self._lock:
            self._store[key] = CacheItem(value=copy.deepcopy(value), expires_at=self._clock() + self._ttl)
            self._store.move_to_end(key)
            if self._max_entries is not None:
                while len(self._store) > self._max_entries:
                    self._store.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

