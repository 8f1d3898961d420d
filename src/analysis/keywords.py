# src/analysis/keywords.py — v1
"""Tokenization, term-frequency ranking and extractive summary selection."""

from __future__ import annotations

import re
from collections import Counter

# English function words plus filler that appears in nearly every medical report.
STOPWORDS: frozenset[str] = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from", "has", "he",
    "in", "is", "it", "its", "of", "on", "that", "the", "to", "was", "were",
    "will", "with", "patient", "treatment", "medication", "dose", "mg",
    "tablets", "daily", "prescribed", "doctor", "hospital", "medical", "health",
})

MIN_TOKEN_LENGTH = 3

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_SENTENCE = re.compile(r"[^.!?]+[.!?]+")


def tokenize(text: str) -> list[str]:
    """Lowercase, strip punctuation, split on whitespace, drop short and stop words."""
    cleaned = _PUNCTUATION.sub("", text.lower())
    return [
        tok for tok in cleaned.split()
        if len(tok) >= MIN_TOKEN_LENGTH and tok not in STOPWORDS
    ]


def term_frequency(tokens: list[str]) -> Counter[str]:
    return Counter(tokens)


def rank_keywords(
    frequency: Counter[str], exclude: set[str] | None = None, limit: int = 10
) -> list[str]:
    """Most frequent tokens first; ties keep first-seen order.

    Args:
        frequency: Token counts.
        exclude: Lowercased tokens to leave out (already-known medical terms).
        limit: Maximum number of keywords.
    """
    exclude = exclude or set()
    ranked = [tok for tok, _ in frequency.most_common() if tok not in exclude]
    return ranked[:limit]


def split_sentences(text: str) -> list[str]:
    """Sentences ending in '.', '!' or '?'; trailing unterminated text is dropped."""
    return [s.strip() for s in _SENTENCE.findall(text) if s.strip()]


def select_summary(sentences: list[str], terms: list[str], max_sentences: int = 3) -> str:
    """Join up to ``max_sentences`` sentences that mention any of ``terms``."""
    needles = [t.lower() for t in terms if t]
    selected: list[str] = []
    for sentence in sentences:
        lowered = sentence.lower()
        if any(n in lowered for n in needles):
            selected.append(sentence)
            if len(selected) >= max_sentences:
                break
    return " ".join(selected)


def merge_keywords(*groups: list[str]) -> list[str]:
    """Concatenate keyword lists, dropping case-insensitive duplicates."""
    seen: set[str] = set()
    merged: list[str] = []
    for group in groups:
        for kw in group:
            key = kw.lower()
            if key in seen:
                continue
            seen.add(key)
            merged.append(kw)
    return merged
