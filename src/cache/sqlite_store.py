# src/cache/sqlite_store.py — v2
"""SQLite-based persistent cache tier (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3 through the shared Database handle.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime

from medtranslate.cache.base_cache_store import BaseCacheStore
from medtranslate.cache.models import CacheEntry, CacheKey
from medtranslate.core.errors import CacheError
from medtranslate.core.models import MedicalTerm
from medtranslate.storage.database import Database

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS translation_cache (
    source_text TEXT NOT NULL,
    source_language TEXT NOT NULL,
    target_language TEXT NOT NULL,
    translated_text TEXT NOT NULL,
    translation_source TEXT NOT NULL,
    usage_count INTEGER NOT NULL DEFAULT 1,
    last_used TEXT NOT NULL,
    medical_terms TEXT NOT NULL DEFAULT '[]',
    UNIQUE (source_text, source_language, target_language)
);
"""

_KEY_FILTER = "source_text = ? AND source_language = ? AND target_language = ?"


class SqliteCacheStore(BaseCacheStore):
    """Translations in the ``translation_cache`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._db.apply_schema(_SCHEMA)

    async def get(self, key: CacheKey) -> CacheEntry | None:
        try:
            row = self._db.connection.execute(
                f"""SELECT translated_text, translation_source, usage_count,
                           last_used, medical_terms
                    FROM translation_cache WHERE {_KEY_FILTER}""",
                tuple(key),
            ).fetchone()
        except sqlite3.Error as e:
            raise CacheError(f"Cache lookup failed: {e}") from e
        if row is None:
            return None
        try:
            terms = [MedicalTerm(**t) for t in json.loads(row[4])]
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring malformed medical_terms in cache row: %s", e)
            terms = []
        try:
            return CacheEntry(
                source_text=key.source_text,
                source_language=key.source_language,
                target_language=key.target_language,
                translated_text=row[0],
                translation_source=row[1],
                usage_count=row[2],
                last_used=datetime.fromisoformat(row[3]),
                medical_terms=terms,
            )
        except (ValueError, TypeError) as e:
            raise CacheError(f"Malformed cache row: {e}") from e

    async def upsert(self, entry: CacheEntry) -> None:
        try:
            conn = self._db.connection
            conn.execute(
                """INSERT INTO translation_cache
                   (source_text, source_language, target_language, translated_text,
                    translation_source, usage_count, last_used, medical_terms)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT(source_text, source_language, target_language) DO UPDATE SET
                       translated_text = excluded.translated_text,
                       translation_source = excluded.translation_source,
                       usage_count = excluded.usage_count,
                       last_used = excluded.last_used,
                       medical_terms = excluded.medical_terms""",
                (
                    entry.source_text,
                    entry.source_language,
                    entry.target_language,
                    entry.translated_text,
                    entry.translation_source,
                    entry.usage_count,
                    entry.last_used.isoformat(),
                    json.dumps([t.model_dump() for t in entry.medical_terms]),
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Cache upsert failed: {e}") from e

    async def increment_usage(self, key: CacheKey, last_used: datetime) -> None:
        try:
            conn = self._db.connection
            conn.execute(
                f"""UPDATE translation_cache
                    SET usage_count = usage_count + 1, last_used = ?
                    WHERE {_KEY_FILTER}""",
                (last_used.isoformat(), *key),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Cache usage update failed: {e}") from e

    async def clear(self) -> None:
        try:
            conn = self._db.connection
            conn.execute("DELETE FROM translation_cache")
            conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Cache clear failed: {e}") from e
