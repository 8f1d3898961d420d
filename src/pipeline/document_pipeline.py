# src/pipeline/document_pipeline.py — v2
"""Document pipeline: uploaded file or text to a persisted Document.

Chains the stages:
  1. Extraction (PDF decode or OCR; skipped for text submissions)
  2. Analysis (medical terms, simplified rewrite, keywords, summary)
  3. Persistence (append to the document store)
"""

from __future__ import annotations

import logging
import time

from medtranslate.analysis.analyzer import ContentAnalyzer
from medtranslate.core.models import (
    DEFAULT_ACTOR,
    Document,
    DocumentSource,
    SearchHit,
    UploadedFile,
    utcnow,
)
from medtranslate.extraction.extractor_factory import ContentExtractor
from medtranslate.logging.context import clear_context, set_request_context, set_step
from medtranslate.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Top-level entry point for processing documents.

    Usage:
        pipeline = DocumentPipeline(extractor, analyzer, store)
        document = await pipeline.process_file(UploadedFile.from_path("report.pdf"))
    """

    def __init__(
        self,
        extractor: ContentExtractor,
        analyzer: ContentAnalyzer,
        store: DocumentStore,
    ) -> None:
        self._extractor = extractor
        self._analyzer = analyzer
        self._store = store

    async def process_file(
        self, upload: UploadedFile, actor_id: str = DEFAULT_ACTOR
    ) -> Document:
        """Extract, analyze and store an uploaded PDF or image.

        Raises:
            UnsupportedFileType: If the MIME type is not PDF or image/*.
            ExtractionError: If the file cannot be read.
            StorageError: If the document cannot be saved.
        """
        set_request_context(actor_id)
        try:
            # Resolve first so unsupported types fail before any work is done.
            source = self._extractor.source_for(upload.mime_type)
            set_step("extract")
            content = await self._extractor.extract(upload)
            return await self._analyze_and_store(content, source, actor_id)
        finally:
            clear_context()

    async def process_text(self, text: str, actor_id: str = DEFAULT_ACTOR) -> Document:
        """Analyze and store pasted text."""
        set_request_context(actor_id)
        try:
            return await self._analyze_and_store(
                text.strip(), DocumentSource.TEXT, actor_id
            )
        finally:
            clear_context()

    async def load_reports(self, limit: int = 50) -> list[Document]:
        """Stored documents, newest first."""
        return await self._store.recent(limit)

    async def search_reports(self, query: str) -> list[SearchHit]:
        """Stored documents similar to ``query``, with relevance scores."""
        return await self._store.search(query)

    async def _analyze_and_store(
        self, content: str, source: DocumentSource, actor_id: str
    ) -> Document:
        t0 = time.monotonic()
        set_step("analyze")
        analysis = await self._analyzer.analyze(content, actor_id=actor_id)

        document = Document(
            content=content,
            source=source,
            timestamp=utcnow(),
            keywords=analysis.keywords,
            summary=analysis.summary,
            simplified_content=analysis.simplified_content,
            medical_terms=analysis.medical_terms,
        )
        set_step("store")
        stored = await self._store.save(document)

        logger.info(
            "Processed %s document %s in %dms (%d keywords, %d terms%s)",
            source.value,
            stored.id,
            int((time.monotonic() - t0) * 1000),
            len(stored.keywords),
            len(stored.medical_terms),
            ", degraded" if analysis.degraded else "",
        )
        return stored
