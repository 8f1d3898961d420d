# tests/unit/cache/test_tiered_cache.py — v1
"""Tests for cache/tiered_cache.py — memory tier over a persistent store."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from medtranslate.cache.base_cache_store import BaseCacheStore, MemoryCacheStore
from medtranslate.cache.models import CacheEntry, CacheKey
from medtranslate.cache.tiered_cache import TieredCache
from medtranslate.core.errors import CacheError
from medtranslate.core.models import MedicalTerm


class BrokenStore(BaseCacheStore):
    """Persistent tier whose every operation fails."""

    async def get(self, key):
        raise CacheError("db down")

    async def upsert(self, entry):
        raise CacheError("db down")

    async def increment_usage(self, key, last_used):
        raise CacheError("db down")

    async def clear(self):
        raise CacheError("db down")


def _entry(text: str = "fever", **kwargs) -> CacheEntry:
    return CacheEntry(
        source_text=text,
        source_language="en",
        target_language="es",
        translated_text="fiebre",
        translation_source="openai",
        **kwargs,
    )


class TestTieredCache:
    @pytest.mark.asyncio
    async def test_miss_returns_none(self):
        cache = TieredCache(MemoryCacheStore())
        assert await cache.get("fever", "en", "es") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, clock):
        cache = TieredCache(MemoryCacheStore(), clock=clock)
        await cache.set(_entry(medical_terms=[MedicalTerm(term="pyrexia")]))
        hit = await cache.get("fever", "en", "es")
        assert hit is not None
        assert hit.translated_text == "fiebre"
        assert hit.translation_source == "openai"
        assert hit.medical_terms[0].term == "pyrexia"

    @pytest.mark.asyncio
    async def test_key_is_exact_match(self):
        cache = TieredCache(MemoryCacheStore())
        await cache.set(_entry("fever"))
        assert await cache.get("Fever", "en", "es") is None
        assert await cache.get("fever ", "en", "es") is None
        assert await cache.get("fever", "en", "fr") is None

    @pytest.mark.asyncio
    async def test_memory_hit_bumps_usage_and_last_used(self, clock):
        cache = TieredCache(MemoryCacheStore(), clock=clock)
        await cache.set(_entry(usage_count=1, last_used=clock()))
        clock.advance(60)
        hit = await cache.get("fever", "en", "es")
        assert hit.usage_count == 2
        assert hit.last_used == clock()

    @pytest.mark.asyncio
    async def test_persistent_hit_is_promoted(self, clock):
        store = MemoryCacheStore()
        await store.upsert(_entry(usage_count=4))
        cache = TieredCache(store, clock=clock)
        assert cache.memory_size == 0

        hit = await cache.get("fever", "en", "es")
        assert hit.usage_count == 5
        assert hit.last_used == clock()
        assert cache.memory_size == 1

        await cache.drain()
        stored = await store.get(CacheKey("fever", "en", "es"))
        assert stored.usage_count == 5
        assert stored.last_used == clock()

    @pytest.mark.asyncio
    async def test_memory_tier_is_bounded(self, clock):
        cache = TieredCache(MemoryCacheStore(), max_entries=3, clock=clock)
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for i in range(10):
            await cache.set(_entry(f"t{i}", last_used=base + timedelta(seconds=i)))
        assert cache.memory_size == 3
        assert cache.max_entries == 3

    @pytest.mark.asyncio
    async def test_evicted_entries_still_served_from_store(self, clock):
        cache = TieredCache(MemoryCacheStore(), max_entries=1, clock=clock)
        await cache.set(_entry("first", last_used=clock()))
        clock.advance(1)
        await cache.set(_entry("second", last_used=clock()))
        hit = await cache.get("first", "en", "es")
        assert hit is not None
        await cache.drain()

    @pytest.mark.asyncio
    async def test_without_store_memory_only(self):
        cache = TieredCache(store=None)
        await cache.set(_entry())
        assert (await cache.get("fever", "en", "es")).translated_text == "fiebre"
        assert await cache.get("cough", "en", "es") is None

    @pytest.mark.asyncio
    async def test_store_failures_are_swallowed(self):
        cache = TieredCache(BrokenStore())
        await cache.set(_entry())
        # Served from memory even though the store write failed
        assert (await cache.get("fever", "en", "es")) is not None
        # Lookup failure in the store is a miss
        assert await cache.get("cough", "en", "es") is None
        await cache.clear()
        assert cache.memory_size == 0

    @pytest.mark.asyncio
    async def test_clear_empties_both_tiers(self):
        store = MemoryCacheStore()
        cache = TieredCache(store)
        await cache.set(_entry())
        await cache.clear()
        assert cache.memory_size == 0
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_drain_without_pending_is_noop(self):
        await TieredCache(MemoryCacheStore()).drain()
