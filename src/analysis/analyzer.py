# src/analysis/analyzer.py — v1
"""Content analyzer: medical terms, simplified rewrite, keywords and summary.

The provider request is an enrichment. When it fails the analyzer still
returns keywords and a summary computed from the original text alone.
"""

from __future__ import annotations

import logging

from medtranslate.analysis.keywords import (
    merge_keywords,
    rank_keywords,
    select_summary,
    split_sentences,
    term_frequency,
    tokenize,
)
from medtranslate.core.errors import TranslationFailed, ValidationError
from medtranslate.core.models import DEFAULT_ACTOR, AnalysisResult, MedicalTerm, unique_terms
from medtranslate.translation.orchestrator import TranslationOrchestrator
from medtranslate.translation.prompts import SIMPLIFY_SOURCE, SIMPLIFY_TARGET

logger = logging.getLogger(__name__)


class ContentAnalyzer:
    """Builds the analysis fields of a Document from raw text."""

    def __init__(
        self,
        orchestrator: TranslationOrchestrator,
        keyword_limit: int = 10,
        summary_max_sentences: int = 3,
    ) -> None:
        self._orchestrator = orchestrator
        self._keyword_limit = keyword_limit
        self._summary_max_sentences = summary_max_sentences

    async def analyze(self, text: str, actor_id: str = DEFAULT_ACTOR) -> AnalysisResult:
        """Analyze raw document text.

        Never raises for provider trouble: on TranslationFailed the result is
        marked ``degraded`` and built from ``text`` alone.
        """
        try:
            result = await self._orchestrator.translate(
                text, SIMPLIFY_SOURCE, SIMPLIFY_TARGET, actor_id=actor_id
            )
        except (TranslationFailed, ValidationError) as e:
            logger.warning("Medical term identification unavailable, degrading: %s", e)
            return self._build(simplified=text, terms=[], corpus=text, degraded=True)

        terms = unique_terms(result.medical_terms)
        simplified = result.translated_text
        return self._build(
            simplified=simplified,
            terms=terms,
            corpus=f"{text} {simplified}",
            degraded=False,
        )

    def _build(
        self,
        simplified: str,
        terms: list[MedicalTerm],
        corpus: str,
        degraded: bool,
    ) -> AnalysisResult:
        term_names = [t.term for t in terms]
        frequency = term_frequency(tokenize(corpus))
        top = rank_keywords(
            frequency,
            exclude={name.lower() for name in term_names},
            limit=self._keyword_limit,
        )
        summary = select_summary(
            split_sentences(simplified),
            term_names + top,
            max_sentences=self._summary_max_sentences,
        )
        return AnalysisResult(
            keywords=merge_keywords(term_names, top),
            summary=summary,
            simplified_content=simplified,
            medical_terms=terms,
            degraded=degraded,
        )
