# src/storage/document_store.py — v1
"""Append-only store of processed documents with similarity search."""

from __future__ import annotations

import json
import logging
import sqlite3
import uuid
from datetime import datetime

from medtranslate.core.errors import StorageError
from medtranslate.core.models import Document, DocumentSource, MedicalTerm, SearchHit, utcnow
from medtranslate.core.similarity import trigram_similarity
from medtranslate.storage.database import Database

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS medical_reports (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    source TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    keywords TEXT NOT NULL,
    summary TEXT NOT NULL,
    simplified_content TEXT NOT NULL,
    medical_terms TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_medical_reports_timestamp ON medical_reports(timestamp);
"""

_COLUMNS = "id, content, source, timestamp, keywords, summary, simplified_content, medical_terms"


def generate_document_id(timestamp: datetime | None = None) -> str:
    """Generate a document id: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = timestamp or utcnow()
    return f"{ts.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


class DocumentStore:
    """Documents in the ``medical_reports`` table."""

    def __init__(
        self,
        database: Database,
        similarity_threshold: float = 0.3,
        max_results: int = 20,
    ) -> None:
        self._db = database
        self._threshold = similarity_threshold
        self._max_results = max_results
        self._db.apply_schema(_SCHEMA)

    async def save(self, document: Document) -> Document:
        """Insert a document and return it with its assigned id.

        Raises:
            StorageError: If the insert fails.
        """
        doc_id = document.id or generate_document_id(document.timestamp)
        stored = document.model_copy(update={"id": doc_id})
        try:
            conn = self._db.connection
            conn.execute(
                f"INSERT INTO medical_reports ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    doc_id,
                    stored.content,
                    stored.source.value,
                    stored.timestamp.isoformat(),
                    json.dumps(stored.keywords),
                    stored.summary,
                    stored.simplified_content,
                    json.dumps([t.model_dump() for t in stored.medical_terms]),
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save document: {e}") from e
        logger.info("Saved document %s (%s)", doc_id, stored.source.value)
        return stored

    async def get(self, doc_id: str) -> Document | None:
        row = self._fetch(f"SELECT {_COLUMNS} FROM medical_reports WHERE id = ?", (doc_id,))
        return _row_to_document(row[0]) if row else None

    async def recent(self, limit: int = 50) -> list[Document]:
        """Documents ordered newest first."""
        rows = self._fetch(
            f"SELECT {_COLUMNS} FROM medical_reports ORDER BY timestamp DESC LIMIT ?",
            (limit,),
        )
        return [_row_to_document(r) for r in rows]

    async def search(self, query: str) -> list[SearchHit]:
        """Documents whose text is similar to ``query``, best match first.

        Scores each document's content, summary and keywords by trigram
        similarity and keeps those at or above the configured threshold.
        """
        if not query.strip():
            return []
        rows = self._fetch(f"SELECT {_COLUMNS} FROM medical_reports", ())
        hits: list[SearchHit] = []
        for row in rows:
            doc = _row_to_document(row)
            haystack = " ".join([doc.content, doc.summary, " ".join(doc.keywords)])
            score = trigram_similarity(query, haystack)
            if score >= self._threshold:
                hits.append(SearchHit(document=doc, score=score))
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[: self._max_results]

    def _fetch(self, sql: str, params: tuple) -> list[tuple]:
        try:
            return self._db.connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read documents: {e}") from e


def _row_to_document(row: tuple) -> Document:
    return Document(
        id=row[0],
        content=row[1],
        source=DocumentSource(row[2]),
        timestamp=datetime.fromisoformat(row[3]),
        keywords=json.loads(row[4]),
        summary=row[5],
        simplified_content=row[6],
        medical_terms=[MedicalTerm(**t) for t in json.loads(row[7])],
    )
