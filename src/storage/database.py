# src/storage/database.py — v1
"""Process-wide SQLite handle with explicit open/close.

Constructed once at startup and injected into every store; each store
applies its own schema through apply_schema().
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


class Database:
    """Owns the single SQLite connection used by the persistent stores."""

    def __init__(self, path: Path | str) -> None:
        self._path = str(path) if str(path) == IN_MEMORY else str(Path(path).expanduser())
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> Database:
        """Open the connection (idempotent)."""
        if self._conn is not None:
            return self
        if self._path != IN_MEMORY:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self._path)
        if self._path != IN_MEMORY:
            self._conn.execute("PRAGMA journal_mode=WAL")
        logger.debug("Opened database %s", self._path)
        return self

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not open; call open() first")
        return self._conn

    def apply_schema(self, schema: str) -> None:
        """Run idempotent DDL (CREATE ... IF NOT EXISTS)."""
        self.connection.executescript(schema)

    def close(self) -> None:
        """Close the connection (idempotent)."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed database %s", self._path)
