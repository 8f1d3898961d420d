# src/ratelimit/sqlite_state_store.py — v1
"""SQLite-backed rate-limit store (RATE_LIMIT_BACKEND=sqlite).

Buckets survive restarts, so an actor cannot reset its quota by
reconnecting.
"""

from __future__ import annotations

import logging
from datetime import datetime

from medtranslate.ratelimit.base_state_store import BaseRateLimitStore
from medtranslate.ratelimit.models import RateLimitState
from medtranslate.storage.database import Database

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS rate_limits (
    actor_id TEXT NOT NULL,
    provider_id TEXT NOT NULL,
    tokens_remaining INTEGER NOT NULL CHECK (tokens_remaining >= 0),
    last_refill TEXT NOT NULL,
    PRIMARY KEY (actor_id, provider_id)
);
"""


class SqliteRateLimitStore(BaseRateLimitStore):
    """Rate-limit buckets in the ``rate_limits`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._db.apply_schema(_SCHEMA)

    async def get(self, actor_id: str, provider_id: str) -> RateLimitState | None:
        row = self._db.connection.execute(
            "SELECT tokens_remaining, last_refill FROM rate_limits "
            "WHERE actor_id = ? AND provider_id = ?",
            (actor_id, provider_id),
        ).fetchone()
        if row is None:
            return None
        return RateLimitState(
            actor_id=actor_id,
            provider_id=provider_id,
            tokens_remaining=row[0],
            last_refill=datetime.fromisoformat(row[1]),
        )

    async def put(self, state: RateLimitState) -> None:
        conn = self._db.connection
        conn.execute(
            """INSERT INTO rate_limits (actor_id, provider_id, tokens_remaining, last_refill)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(actor_id, provider_id) DO UPDATE SET
                   tokens_remaining = excluded.tokens_remaining,
                   last_refill = excluded.last_refill""",
            (
                state.actor_id,
                state.provider_id,
                state.tokens_remaining,
                state.last_refill.isoformat(),
            ),
        )
        conn.commit()
