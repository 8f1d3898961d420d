# src/core/similarity.py — v3
"""Trigram text similarity used by document search.

Scores how much of a query's character trigrams appear in a document, in the
spirit of PostgreSQL's pg_trgm word similarity: 1.0 means every query trigram
was found, 0.0 means none were.
"""

from __future__ import annotations

import re


def normalize_text(text: str) -> str:
    """Normalize text: lowercase, strip punctuation, collapse whitespace."""
    text = text.lower()
    text = re.sub(r"[^\w\s]", " ", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def trigrams(text: str) -> set[str]:
    """Character trigrams of each word, padded like pg_trgm ("  w", "wo ")."""
    grams: set[str] = set()
    for word in normalize_text(text).split():
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            grams.add(padded[i:i + 3])
    return grams


def trigram_similarity(query: str, text: str) -> float:
    """Fraction of the query's trigrams present in ``text``.

    Returns:
        Score in [0, 1]. An empty query scores 0.0.
    """
    query_grams = trigrams(query)
    if not query_grams:
        return 0.0
    text_grams = trigrams(text)
    if not text_grams:
        return 0.0
    return len(query_grams & text_grams) / len(query_grams)
