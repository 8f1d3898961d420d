# src/cache/memory_tier.py — v1
"""Bounded in-process cache tier with least-recently-used eviction.

Entries live in a dict (the arena). Recency is tracked by a min-heap of
(last_used, seq, key) records; touching an entry pushes a new record and
leaves the old one stale. Stale records are skipped at eviction time and the
heap is rebuilt when they outnumber live entries, keeping eviction at
O(log n) amortised.
"""

from __future__ import annotations

import heapq
import itertools
from datetime import datetime

from medtranslate.cache.models import CacheEntry, CacheKey


class MemoryTier:
    """LRU-by-``last_used`` map of cache entries."""

    def __init__(self, max_entries: int = 1000) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._max_entries = max_entries
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._live_seq: dict[CacheKey, int] = {}
        self._heap: list[tuple[datetime, int, CacheKey]] = []
        self._seq = itertools.count()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry without changing its recency."""
        return self._entries.get(key)

    def touch(self, key: CacheKey, last_used: datetime) -> None:
        """Record an access: set last_used and move the entry in the index."""
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.last_used = last_used
        self._index(key, last_used)

    def put(self, entry: CacheEntry) -> list[CacheEntry]:
        """Insert or replace an entry, evicting as needed.

        Returns:
            Entries evicted to get back under capacity, oldest first.
        """
        key = entry.key
        self._entries[key] = entry
        self._index(key, entry.last_used)
        evicted: list[CacheEntry] = []
        while len(self._entries) > self._max_entries:
            evicted.append(self._pop_oldest())
        return evicted

    def clear(self) -> None:
        self._entries.clear()
        self._live_seq.clear()
        self._heap.clear()

    def _index(self, key: CacheKey, last_used: datetime) -> None:
        seq = next(self._seq)
        self._live_seq[key] = seq
        heapq.heappush(self._heap, (last_used, seq, key))
        if len(self._heap) > 2 * len(self._entries) + 16:
            self._compact()

    def _pop_oldest(self) -> CacheEntry:
        while self._heap:
            _, seq, key = heapq.heappop(self._heap)
            if self._live_seq.get(key) == seq:
                del self._live_seq[key]
                return self._entries.pop(key)
        raise RuntimeError("recency index out of sync with cache entries")

    def _compact(self) -> None:
        self._heap = [rec for rec in self._heap if self._live_seq.get(rec[2]) == rec[1]]
        heapq.heapify(self._heap)
