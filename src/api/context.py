# src/api/context.py — v1
"""Process context: builds every long-lived component once and tears it down.

Usage:
    async with await PipelineContext.create(settings) as ctx:
        document = await ctx.pipeline.process_file(upload)

Components are wired by constructor injection; nothing here is a
module-level global.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from medtranslate.analysis.analyzer import ContentAnalyzer
from medtranslate.cache.cache_factory import create_tiered_cache
from medtranslate.cache.tiered_cache import TieredCache
from medtranslate.config.settings import Settings
from medtranslate.extraction.extractor_factory import ContentExtractor
from medtranslate.extraction.ocr_engine import OcrEngine, TesseractOcrEngine
from medtranslate.pipeline.document_pipeline import DocumentPipeline
from medtranslate.ratelimit.limiter import RateLimiter
from medtranslate.ratelimit.limiter_factory import create_rate_limiter
from medtranslate.storage.database import Database
from medtranslate.storage.document_store import DocumentStore
from medtranslate.storage.error_log import SqliteErrorLog
from medtranslate.translation.gateway import ProviderGateway, build_gateways
from medtranslate.translation.orchestrator import TranslationOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Every process-wide component, wired together."""

    settings: Settings
    database: Database
    cache: TieredCache
    rate_limiter: RateLimiter
    orchestrator: TranslationOrchestrator
    ocr_engine: OcrEngine
    extractor: ContentExtractor
    analyzer: ContentAnalyzer
    documents: DocumentStore
    pipeline: DocumentPipeline
    _closed: bool = False

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        providers: list[ProviderGateway] | None = None,
        ocr_engine: OcrEngine | None = None,
    ) -> PipelineContext:
        """Open storage and build all components.

        Args:
            settings: Application settings. Loaded from .env if None.
            providers: Provider gateways in priority order. Built from
                settings (PROVIDER_ORDER and API keys) if None.
            ocr_engine: OCR engine. A lazily started Tesseract engine if None.
        """
        settings = settings or Settings()
        database = Database(settings.database_path).open()

        cache = create_tiered_cache(settings, database)
        rate_limiter = create_rate_limiter(settings, database)
        gateways = providers if providers is not None else build_gateways(settings)
        orchestrator = TranslationOrchestrator(
            cache=cache,
            rate_limiter=rate_limiter,
            providers=gateways,
            error_log=SqliteErrorLog(database),
        )

        ocr = ocr_engine or TesseractOcrEngine(
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
            timeout_s=settings.ocr_timeout_s,
        )
        extractor = ContentExtractor(ocr)
        analyzer = ContentAnalyzer(
            orchestrator,
            keyword_limit=settings.keyword_limit,
            summary_max_sentences=settings.summary_max_sentences,
        )
        documents = DocumentStore(
            database,
            similarity_threshold=settings.search_similarity_threshold,
            max_results=settings.search_max_results,
        )
        pipeline = DocumentPipeline(extractor, analyzer, documents)

        logger.info(
            "Pipeline ready: providers=%s, cache=%s, database=%s",
            ",".join(orchestrator.provider_ids) or "none",
            settings.cache_backend,
            database.path,
        )
        return cls(
            settings=settings,
            database=database,
            cache=cache,
            rate_limiter=rate_limiter,
            orchestrator=orchestrator,
            ocr_engine=ocr,
            extractor=extractor,
            analyzer=analyzer,
            documents=documents,
            pipeline=pipeline,
        )

    async def shutdown(self) -> None:
        """Release everything in reverse order of creation. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self.cache.drain()
        await self.ocr_engine.close()
        await self.orchestrator.aclose()
        self.database.close()
        logger.info("Pipeline shut down")

    async def __aenter__(self) -> PipelineContext:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()
