"""In-memory read-through TTL cache with request coalescing.

At most one fetch per key is in flight at any time: concurrent callers for a
key whose fetch is pending await the same ``asyncio.Task`` instead of issuing
a duplicate upstream call. Only successful results are stored.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value with the monotonic time it was fetched and its TTL."""

    value: T
    fetched_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        """Whether the entry is still within its TTL at ``now``."""
        return now - self.fetched_at < self.ttl


@dataclass
class CacheStats:
    """Counters describing cache usage."""

    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    expired: int = 0
    failures: int = 0
    entries: int = 0
    in_flight: int = 0


class CoalescingCache:
    """Read-through TTL cache keyed by ``(source_kind, *query_params)`` tuples.

    Args:
        clock: Callable returning monotonic time in seconds.
            Defaults to time.monotonic. Inject a mock for deterministic tests.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, CacheEntry[Any]] = {}
        self._in_flight: dict[Hashable, asyncio.Task[Any]] = {}
        self._stats = CacheStats()

    async def get_or_fetch(
        self,
        key: Hashable,
        fetch: Callable[[], Awaitable[T]],
        ttl: float,
    ) -> T:
        """Return the cached value for ``key``, fetching it if absent or stale.

        Args:
            key: Cache key.
            fetch: Zero-argument coroutine function producing the value.
            ttl: Time-to-live in seconds for a freshly fetched value.

        Returns:
            The cached or freshly fetched value.

        Raises:
            Exception: Whatever ``fetch`` raised. Failures are not cached.
        """
        entry = self._entries.get(key)
        if entry is not None:
            if entry.is_fresh(self._clock()):
                self._stats.hits += 1
                logger.debug("Cache hit for {}", key)
                return entry.value
            self._stats.expired += 1
            del self._entries[key]

        task = self._in_flight.get(key)
        if task is None:
            self._stats.misses += 1
            logger.debug("Cache miss for {}", key)
            task = asyncio.ensure_future(fetch())
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._on_fetch_done(key, done, ttl))
        else:
            self._stats.coalesced += 1
            logger.debug("Joining in-flight fetch for {}", key)

        # Shield so a cancelled caller does not cancel the shared fetch
        result: T = await asyncio.shield(task)
        return result

    def peek(self, key: Hashable) -> Any | None:
        """Return a fresh cached value without fetching, or None."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.value

    def invalidate(self, key: Hashable) -> bool:
        """Drop the cached value for ``key``.

        Returns:
            True if an entry was removed.
        """
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop all cached values. In-flight fetches are left running."""
        self._entries.clear()

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""
        return CacheStats(
            hits=self._stats.hits,
            misses=self._stats.misses,
            coalesced=self._stats.coalesced,
            expired=self._stats.expired,
            failures=self._stats.failures,
            entries=len(self._entries),
            in_flight=len(self._in_flight),
        )

    def _on_fetch_done(self, key: Hashable, task: asyncio.Task[Any], ttl: float) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if task.cancelled():
            return
        # Retrieving the exception marks it handled even when no caller is left
        exc = task.exception()
        if exc is not None:
            self._stats.failures += 1
            logger.debug("Fetch for {} failed, not caching: {!r}", key, exc)
            return
        self._entries[key] = CacheEntry(value=task.result(), fetched_at=self._clock(), ttl=ttl)
