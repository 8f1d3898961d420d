# src/cache/models.py — v2
"""Cache domain models: CacheKey, CacheEntry."""

from __future__ import annotations

from datetime import datetime
from typing import NamedTuple

from pydantic import BaseModel, Field

from medtranslate.core.models import MedicalTerm, utcnow


class CacheKey(NamedTuple):
    """Exact-match identity of a translation (no normalization)."""

    source_text: str
    source_language: str
    target_language: str


class CacheEntry(BaseModel):
    """Cached translation plus usage bookkeeping."""

    source_text: str
    source_language: str
    target_language: str
    translated_text: str
    translation_source: str
    usage_count: int = 1
    last_used: datetime = Field(default_factory=utcnow)
    medical_terms: list[MedicalTerm] = Field(default_factory=list)

    @property
    def key(self) -> CacheKey:
        return CacheKey(self.source_text, self.source_language, self.target_language)
