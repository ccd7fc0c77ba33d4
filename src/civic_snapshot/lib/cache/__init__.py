"""Cache library — in-memory TTL cache with request coalescing.

Public API:
    - CoalescingCache: Read-through cache with at most one in-flight fetch per key
    - CacheEntry: Cached value with fetch time and TTL
    - CacheStats: Usage counters
"""

from civic_snapshot.lib.cache.coalescing import CacheEntry, CacheStats, CoalescingCache

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CoalescingCache",
]
