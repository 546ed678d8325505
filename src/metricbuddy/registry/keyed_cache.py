"""
Keyed Cache - Single-Flight Memoization per Key.

Holds built values (collector classes, collector instances) forever. Each
value is built at most once, even under concurrent first access.

Design Notes:
    - A global lock guards the entry and per-key lock tables only
    - Builders run under their key's lock; different keys never block
      each other
    - A failed build stores nothing and is not retried by the cache
    - Per-key locks are dropped when their build ends, failed or not
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    builds: int = 0
    failures: int = 0
    current_entries: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class KeyedCache(Generic[K, V]):
    """
    Thread-safe cache building each value exactly once.

    Usage:
        cache = KeyedCache("classes")
        cls = cache.get_or_build(key, lambda: generate(interface))
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self._entries: Dict[K, V] = {}
        self._key_locks: Dict[K, threading.Lock] = {}
        self._lock = threading.Lock()
        self._stats = CacheStats()

    def get(self, key: K) -> Optional[V]:
        """Get a built value, or None if the key was never built."""
        with self._lock:
            return self._entries.get(key)

    def get_or_build(self, key: K, builder: Callable[[], V]) -> V:
        """
        Get the value for key, building it on first access.

        Args:
            key: Cache key
            builder: Called with no arguments to build the value

        Returns:
            The cached or newly built value

        Raises:
            Exception: Whatever builder raises; nothing is stored
        """
        with self._lock:
            if key in self._entries:
                self._stats.hits += 1
                return self._entries[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # Another thread may have finished the build while we waited
            with self._lock:
                if key in self._entries:
                    self._stats.hits += 1
                    return self._entries[key]
                self._stats.misses += 1

            try:
                value = builder()
            except Exception:
                with self._lock:
                    self._stats.failures += 1
                    self._release_key_lock(key, key_lock)
                raise

            with self._lock:
                # A retry racing a failed build may have stored first
                value = self._entries.setdefault(key, value)
                self._release_key_lock(key, key_lock)
                self._stats.builds += 1
            logger.debug(f"{self.name}: built entry for {key!r}")
            return value

    def _release_key_lock(self, key: K, key_lock: threading.Lock) -> None:
        # Caller holds self._lock
        if self._key_locks.get(key) is key_lock:
            del self._key_locks[key]

    @property
    def pending_keys(self) -> int:
        """Number of keys with a build lock outstanding."""
        with self._lock:
            return len(self._key_locks)

    def items(self) -> List[Tuple[K, V]]:
        """Snapshot of all entries."""
        with self._lock:
            return list(self._entries.items())

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                builds=self._stats.builds,
                failures=self._stats.failures,
                current_entries=len(self._entries),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
