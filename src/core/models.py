# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

import mimetypes
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACTOR = "anonymous"


def utcnow() -> datetime:
    """Timezone-aware current time; default clock for cache and limiter."""
    return datetime.now(timezone.utc)


# === DOCUMENT MODELS ===


class DocumentSource(str, Enum):
    """Where a document's text came from."""

    PDF = "pdf"
    IMAGE = "image"
    TEXT = "text"


class MedicalTerm(BaseModel):
    """A medical term identified by a provider, with a plain explanation."""

    term: str
    explanation: str = ""


def unique_terms(terms: list[MedicalTerm]) -> list[MedicalTerm]:
    """Drop repeated terms (case-insensitive), keeping the first occurrence."""
    seen: set[str] = set()
    result: list[MedicalTerm] = []
    for t in terms:
        key = t.term.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(t)
    return result


class Document(BaseModel):
    """Processed document record. Frozen once created."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    content: str
    source: DocumentSource
    timestamp: datetime = Field(default_factory=utcnow)
    keywords: list[str] = Field(default_factory=list)
    summary: str = ""
    simplified_content: str = ""
    medical_terms: list[MedicalTerm] = Field(default_factory=list)


class SearchHit(BaseModel):
    """Document returned by a similarity search with its relevance score."""

    document: Document
    score: float


class AnalysisResult(BaseModel):
    """Output of the content analyzer for one text."""

    keywords: list[str] = Field(default_factory=list)
    summary: str = ""
    simplified_content: str = ""
    medical_terms: list[MedicalTerm] = Field(default_factory=list)
    degraded: bool = False


# === UPLOAD MODEL ===


class UploadedFile(BaseModel):
    """Raw uploaded file: bytes plus the MIME type the client declared."""

    filename: str
    mime_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path | str, mime_type: str | None = None) -> UploadedFile:
        """Read a file from disk, guessing the MIME type from its name."""
        p = Path(path)
        if mime_type is None:
            mime_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        return cls(filename=p.name, mime_type=mime_type, data=p.read_bytes())


# === TRANSLATION MODELS ===


class TranslationRequest(BaseModel):
    """One logical translation request routed through the orchestrator."""

    text: str
    source_language: str
    target_language: str
    actor_id: str = DEFAULT_ACTOR


class TranslationResult(BaseModel):
    """Translated text and the provider that produced it."""

    translated_text: str
    source: str
    medical_terms: list[MedicalTerm] = Field(default_factory=list)
    cached: bool = False
