# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from medtranslate.cache.base_cache_store import BaseCacheStore, MemoryCacheStore
from medtranslate.cache.tiered_cache import TieredCache
from medtranslate.config.settings import Settings
from medtranslate.storage.database import Database


def create_cache_store(
    settings: Settings | None = None, database: Database | None = None
) -> BaseCacheStore:
    """Instantiate the configured persistent cache backend.

    Args:
        settings: Application settings. Defaults to the memory backend.
        database: Open database handle, required for the sqlite backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        return MemoryCacheStore()

    if backend == "sqlite":
        from medtranslate.cache.sqlite_store import SqliteCacheStore

        if database is None:
            raise ValueError("A database handle is required when CACHE_BACKEND=sqlite")
        return SqliteCacheStore(database)

    raise ValueError(f"Unsupported cache backend: {backend!r}")


def create_tiered_cache(
    settings: Settings | None = None, database: Database | None = None
) -> TieredCache:
    """Build the process-wide TieredCache."""
    max_entries = 1000 if settings is None else settings.cache_memory_max_entries
    return TieredCache(
        store=create_cache_store(settings, database),
        max_entries=max_entries,
    )
