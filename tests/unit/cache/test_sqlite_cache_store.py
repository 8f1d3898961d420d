# tests/unit/cache/test_sqlite_cache_store.py — v1
"""Tests for cache/sqlite_store.py — full functional tests (stdlib sqlite3)."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from medtranslate.cache.cache_factory import create_cache_store, create_tiered_cache
from medtranslate.cache.base_cache_store import MemoryCacheStore
from medtranslate.cache.models import CacheEntry, CacheKey
from medtranslate.cache.sqlite_store import SqliteCacheStore
from medtranslate.config.settings import Settings
from medtranslate.core.errors import CacheError
from medtranslate.core.models import MedicalTerm

KEY = CacheKey("Take with food.", "en", "de")


@pytest.fixture
def store(database):
    return SqliteCacheStore(database)


@pytest.fixture
def sample_entry():
    return CacheEntry(
        source_text=KEY.source_text,
        source_language=KEY.source_language,
        target_language=KEY.target_language,
        translated_text="Mit dem Essen einnehmen.",
        translation_source="deepseek",
        usage_count=1,
        last_used=datetime(2026, 2, 16, 9, 30, tzinfo=timezone.utc),
        medical_terms=[MedicalTerm(term="oral", explanation="by mouth")],
    )


class TestSqliteCacheStore:
    @pytest.mark.asyncio
    async def test_upsert_and_get(self, store, sample_entry):
        await store.upsert(sample_entry)
        result = await store.get(KEY)
        assert result is not None
        assert result.translated_text == "Mit dem Essen einnehmen."
        assert result.translation_source == "deepseek"
        assert result.last_used == sample_entry.last_used
        assert result.medical_terms == [MedicalTerm(term="oral", explanation="by mouth")]

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get(CacheKey("nothing", "en", "de")) is None

    @pytest.mark.asyncio
    async def test_upsert_replaces_existing(self, store, sample_entry):
        await store.upsert(sample_entry)
        await store.upsert(
            sample_entry.model_copy(
                update={"translated_text": "Zum Essen nehmen.", "usage_count": 3}
            )
        )
        result = await store.get(KEY)
        assert result.translated_text == "Zum Essen nehmen."
        assert result.usage_count == 3
        count = store._db.connection.execute(
            "SELECT COUNT(*) FROM translation_cache"
        ).fetchone()[0]
        assert count == 1

    @pytest.mark.asyncio
    async def test_increment_usage(self, store, sample_entry):
        await store.upsert(sample_entry)
        later = datetime(2026, 2, 17, tzinfo=timezone.utc)
        await store.increment_usage(KEY, later)
        result = await store.get(KEY)
        assert result.usage_count == 2
        assert result.last_used == later

    @pytest.mark.asyncio
    async def test_clear(self, store, sample_entry):
        await store.upsert(sample_entry)
        await store.clear()
        assert await store.get(KEY) is None

    @pytest.mark.asyncio
    async def test_malformed_terms_column_reads_as_empty(self, store, sample_entry):
        await store.upsert(sample_entry)
        conn = store._db.connection
        conn.execute("UPDATE translation_cache SET medical_terms = 'not json'")
        conn.commit()
        result = await store.get(KEY)
        assert result.medical_terms == []

    @pytest.mark.parametrize(
        "column, value",
        [("last_used", "garbage"), ("usage_count", "many")],
    )
    @pytest.mark.asyncio
    async def test_malformed_row_raises_cache_error(self, store, sample_entry, column, value):
        await store.upsert(sample_entry)
        conn = store._db.connection
        conn.execute(f"UPDATE translation_cache SET {column} = ?", (value,))
        conn.commit()
        with pytest.raises(CacheError):
            await store.get(KEY)

    @pytest.mark.asyncio
    async def test_missing_table_raises_cache_error(self, database, sample_entry):
        store = SqliteCacheStore(database)
        database.connection.execute("DROP TABLE translation_cache")
        with pytest.raises(CacheError):
            await store.get(KEY)
        with pytest.raises(CacheError):
            await store.upsert(sample_entry)


class TestCacheFactory:
    def test_default_is_memory(self):
        assert isinstance(create_cache_store(), MemoryCacheStore)

    def test_sqlite_requires_database(self):
        settings = Settings(_env_file=None, cache_backend="sqlite")
        with pytest.raises(ValueError, match="database"):
            create_cache_store(settings)

    def test_sqlite_backend(self, database):
        settings = Settings(_env_file=None, cache_backend="sqlite")
        assert isinstance(create_cache_store(settings, database), SqliteCacheStore)

    def test_tiered_cache_uses_configured_size(self):
        settings = Settings(
            _env_file=None, cache_backend="memory", cache_memory_max_entries=7
        )
        assert create_tiered_cache(settings).max_entries == 7
