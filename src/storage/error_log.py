# src/storage/error_log.py — v1
"""Append-only sink for translations that failed on every provider.

Writing here is best effort: a failure to record is logged and dropped,
never raised into the request that is already failing.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime

from medtranslate.core.models import utcnow
from medtranslate.storage.database import Database

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS translation_errors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_text TEXT NOT NULL,
    source_language TEXT NOT NULL,
    target_language TEXT NOT NULL,
    error_message TEXT NOT NULL,
    timestamp TEXT NOT NULL
);
"""


class BaseErrorLog(ABC):
    """Records failed translation requests."""

    @abstractmethod
    async def record(
        self,
        source_text: str,
        source_language: str,
        target_language: str,
        error_message: str,
    ) -> None:
        """Append one failure record. Must not raise."""


class SqliteErrorLog(BaseErrorLog):
    """Failure records in the ``translation_errors`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._db.apply_schema(_SCHEMA)

    async def record(
        self,
        source_text: str,
        source_language: str,
        target_language: str,
        error_message: str,
    ) -> None:
        try:
            conn = self._db.connection
            conn.execute(
                """INSERT INTO translation_errors
                   (source_text, source_language, target_language, error_message, timestamp)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    source_text,
                    source_language,
                    target_language,
                    error_message,
                    utcnow().isoformat(),
                ),
            )
            conn.commit()
        except (sqlite3.Error, RuntimeError) as e:
            logger.error("Failed to log translation error: %s", e)

    async def recent(self, limit: int = 50) -> list[dict[str, object]]:
        """Most recent failure records, newest first."""
        rows = self._db.connection.execute(
            """SELECT source_text, source_language, target_language, error_message, timestamp
               FROM translation_errors ORDER BY id DESC LIMIT ?""",
            (limit,),
        ).fetchall()
        return [
            {
                "source_text": r[0],
                "source_language": r[1],
                "target_language": r[2],
                "error_message": r[3],
                "timestamp": datetime.fromisoformat(r[4]),
            }
            for r in rows
        ]
