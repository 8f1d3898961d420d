# src/cache/tiered_cache.py — v1
"""Two-tier translation cache: bounded in-process tier over a persistent store.

Caching is best effort. Persistent-tier failures (CacheError) are logged and
treated as misses or skipped writes; they never change a translation result.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from medtranslate.cache.base_cache_store import BaseCacheStore
from medtranslate.cache.memory_tier import MemoryTier
from medtranslate.cache.models import CacheEntry, CacheKey
from medtranslate.core.errors import CacheError
from medtranslate.core.models import utcnow

logger = logging.getLogger(__name__)


class TieredCache:
    """Translation cache keyed by exact (text, source language, target language)."""

    def __init__(
        self,
        store: BaseCacheStore | None = None,
        max_entries: int = 1000,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._memory = MemoryTier(max_entries)
        self._store = store
        self._clock = clock
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def memory_size(self) -> int:
        return len(self._memory)

    @property
    def max_entries(self) -> int:
        return self._memory.max_entries

    async def get(
        self, source_text: str, source_language: str, target_language: str
    ) -> CacheEntry | None:
        """Look up a translation; every hit refreshes last_used and usage_count."""
        key = CacheKey(source_text, source_language, target_language)
        now = self._clock()

        entry = self._memory.get(key)
        if entry is not None:
            entry.usage_count += 1
            self._memory.touch(key, now)
            return entry

        if self._store is None:
            return None
        try:
            entry = await self._store.get(key)
        except CacheError as e:
            logger.warning("Persistent cache lookup failed: %s", e)
            return None
        if entry is None:
            return None

        entry.usage_count += 1
        entry.last_used = now
        self._evicted(self._memory.put(entry))
        self._schedule_usage_update(self._store, key, now)
        return entry

    async def set(self, entry: CacheEntry) -> None:
        """Store a translation in both tiers."""
        self._evicted(self._memory.put(entry))
        if self._store is None:
            return
        try:
            await self._store.upsert(entry)
        except CacheError as e:
            logger.warning("Failed to save to persistent cache: %s", e)

    async def clear(self) -> None:
        """Empty both tiers."""
        self._memory.clear()
        if self._store is None:
            return
        try:
            await self._store.clear()
        except CacheError as e:
            logger.warning("Failed to clear persistent cache: %s", e)

    async def drain(self) -> None:
        """Wait for background usage updates to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule_usage_update(
        self, store: BaseCacheStore, key: CacheKey, now: datetime
    ) -> None:
        task = asyncio.create_task(self._update_usage(store, key, now))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _update_usage(store: BaseCacheStore, key: CacheKey, now: datetime) -> None:
        try:
            await store.increment_usage(key, now)
        except CacheError as e:
            logger.warning("Failed to update cache usage count: %s", e)

    @staticmethod
    def _evicted(entries: list[CacheEntry]) -> None:
        if entries:
            logger.debug("Evicted %d entries from in-process cache", len(entries))
