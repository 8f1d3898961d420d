# src/cache/base_cache_store.py — v2
"""Abstract persistent cache tier.

Implementations raise CacheError for backend failures; TieredCache logs and
swallows them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from medtranslate.cache.models import CacheEntry, CacheKey


class BaseCacheStore(ABC):
    """Unified interface for persistent cache backends."""

    @abstractmethod
    async def get(self, key: CacheKey) -> CacheEntry | None:
        """Retrieve the entry for an exact (text, source, target) key."""

    @abstractmethod
    async def upsert(self, entry: CacheEntry) -> None:
        """Insert or replace the entry for ``entry.key``."""

    @abstractmethod
    async def increment_usage(self, key: CacheKey, last_used: datetime) -> None:
        """Add one to the stored usage count and refresh last_used."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry."""


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed persistent tier (CACHE_BACKEND=memory); unbounded."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}

    async def get(self, key: CacheKey) -> CacheEntry | None:
        entry = self._entries.get(key)
        return entry.model_copy(deep=True) if entry is not None else None

    async def upsert(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry.model_copy(deep=True)

    async def increment_usage(self, key: CacheKey, last_used: datetime) -> None:
        entry = self._entries.get(key)
        if entry is not None:
            entry.usage_count += 1
            entry.last_used = last_used

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
