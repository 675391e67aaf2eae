"""Short-lived cache for hierarchy read projections.

Entries expire after a TTL and can be dropped by name. Writers must call
``invalidate`` before reporting success so that an immediate re-read never
sees a stale tree. A generation counter keeps a projection that was being
built while an invalidation happened from being stored.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import Any

logger = logging.getLogger(__name__)

FULL_HIERARCHY_KEY = "full_hierarchy"
STATS_KEY = "stats"


def subtree_key(employee_id: int) -> str:
    return f"subtree:{employee_id}"


class HierarchyCache:
    """In-process TTL cache with explicit named-key invalidation."""

    def __init__(self, ttl_seconds: int = 300, clock: Callable[[], float] = time.monotonic):
        """Initialize an empty cache.

        Args:
            ttl_seconds: Lifetime of each entry. Zero disables caching.
            clock: Monotonic time source, replaceable in tests.
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        """Return a live entry, or None when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return value

    def set(self, key: str, value: Any, generation: int | None = None) -> bool:
        """Store ``value`` under ``key``.

        Args:
            key: Cache key.
            value: Value to store.
            generation: Generation observed before ``value`` was computed.
                The value is discarded if an invalidation happened since.

        Returns:
            True if the value was stored.
        """
        if self.ttl_seconds <= 0:
            return False
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[key] = (self._clock(), value)
            return True

    def get_or_set(self, key: str, build: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, building and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached
        generation = self.generation
        value = build()
        if value is not None:
            self.set(key, value, generation=generation)
        return value

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def invalidate(self, keys: Iterable[str]) -> None:
        """Drop the named entries and bump the generation."""
        keys = list(keys)
        with self._lock:
            self._generation += 1
            for key in keys:
                self._entries.pop(key, None)
        logger.debug("Invalidated hierarchy cache keys: %s", keys)

    def invalidate_for(self, employee_ids: Iterable[int]) -> None:
        """Drop the full tree, the stats and every subtree rooted at ``employee_ids``."""
        keys = [FULL_HIERARCHY_KEY, STATS_KEY]
        keys.extend(subtree_key(employee_id) for employee_id in set(employee_ids))
        self.invalidate(keys)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._clock() - entry[0] < self.ttl_seconds
