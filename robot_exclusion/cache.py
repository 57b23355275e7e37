# File: robot_exclusion/cache.py
"""robot_exclusion.cache: thread-safe loading cache with size and write-age bounds.

Concurrent :meth:`LoadingCache.get` calls for the same missing key share a
single loader invocation; every waiter receives the same value or the same
exception. Only successful loads are stored.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, TypeVar

from robot_exclusion.logger import logger

__all__ = ["CacheStats", "LoadingCache"]

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class CacheStats:
    hits: int = 0
    misses: int = 0
    load_successes: int = 0
    load_failures: int = 0
    evictions: int = 0

    def __str__(self) -> str:
        return (
            f"hits={self.hits} misses={self.misses} load_successes={self.load_successes} "
            f"load_failures={self.load_failures} evictions={self.evictions}"
        )


@dataclass(slots=True)
class _Entry(Generic[V]):
    value: V
    written_at: float


class LoadingCache(Generic[K, V]):
    """Bounded cache that fills itself through ``loader``.

    Args:
        loader: called with a key on a miss; its exceptions reach every waiter.
        max_size: maximum number of stored entries; least recently used go first.
        expire_after_write: seconds an entry stays valid after being stored.
        ticker: monotonic clock, replaceable in tests.
    """

    def __init__(
        self,
        loader: Callable[[K], V],
        *,
        max_size: int,
        expire_after_write: float,
        ticker: Callable[[], float] = time.monotonic,
    ) -> None:
        if loader is None:
            raise TypeError("loader is None")
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        if expire_after_write <= 0:
            raise ValueError("expire_after_write must be > 0")
        self._loader = loader
        self._max_size = max_size
        self._ttl = expire_after_write
        self._ticker = ticker
        self._lock = threading.Lock()
        self._entries: OrderedDict[K, _Entry[V]] = OrderedDict()
        self._loading: Dict[K, Future] = {}
        self._generation = 0
        self._hits = 0
        self._misses = 0
        self._load_successes = 0
        self._load_failures = 0
        self._evictions = 0

    def get(self, key: K) -> V:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if not self._expired(entry):
                    self._entries.move_to_end(key)
                    self._hits += 1
                    return entry.value
                del self._entries[key]
                self._evictions += 1
            self._misses += 1
            future = self._loading.get(key)
            if future is not None:
                owner = False
            else:
                owner = True
                future = Future()
                self._loading[key] = future
            generation = self._generation

        if not owner:
            return future.result()
        return self._load(key, future, generation)

    def _load(self, key: K, future: Future, generation: int) -> V:
        try:
            value = self._loader(key)
        except BaseException as exc:
            with self._lock:
                self._loading.pop(key, None)
                self._load_failures += 1
            future.set_exception(exc)
            raise
        with self._lock:
            self._loading.pop(key, None)
            self._load_successes += 1
            if generation == self._generation:
                self._entries[key] = _Entry(value, self._ticker())
                self._entries.move_to_end(key)
                self._evict_over_size()
        future.set_result(value)
        return value

    def invalidate(self, key: K) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_all(self) -> None:
        """Drop every entry; loads already in flight are not stored."""
        with self._lock:
            self._entries.clear()
            self._generation += 1

    def cleanup(self) -> None:
        """Remove expired entries now instead of on the next read."""
        with self._lock:
            for key in [k for k, e in self._entries.items() if self._expired(e)]:
                del self._entries[key]
                self._evictions += 1

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                load_successes=self._load_successes,
                load_failures=self._load_failures,
                evictions=self._evictions,
            )

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not self._expired(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: _Entry[V]) -> bool:
        return self._ticker() - entry.written_at >= self._ttl

    def _evict_over_size(self) -> None:
        while len(self._entries) > self._max_size:
            key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug("Evicted cache entry: %s", key)
