# src/translation/orchestrator.py — v1
"""Translation orchestrator: cache → rate limiter → providers in priority order.

A rate-limit token is consumed and the cache written only after a provider
call returns successfully. If the call is cancelled, CancelledError passes
straight through both steps, so nothing is consumed or cached.
"""

from __future__ import annotations

import logging
from typing import Sequence

from medtranslate.cache.models import CacheEntry
from medtranslate.cache.tiered_cache import TieredCache
from medtranslate.core.errors import (
    ProviderError,
    RateLimitExceeded,
    TranslationFailed,
    ValidationError,
)
from medtranslate.core.models import DEFAULT_ACTOR, TranslationRequest, TranslationResult
from medtranslate.logging.context import provider_context
from medtranslate.ratelimit.limiter import RateLimiter
from medtranslate.storage.error_log import BaseErrorLog
from medtranslate.translation.gateway import ProviderGateway

logger = logging.getLogger(__name__)


class TranslationOrchestrator:
    """Single translate() entry point over cache, limiter and providers."""

    def __init__(
        self,
        cache: TieredCache,
        rate_limiter: RateLimiter,
        providers: Sequence[ProviderGateway],
        error_log: BaseErrorLog | None = None,
    ) -> None:
        self._cache = cache
        self._rate_limiter = rate_limiter
        self._providers = list(providers)
        self._error_log = error_log

    @property
    def provider_ids(self) -> list[str]:
        return [p.provider_id for p in self._providers]

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        actor_id: str = DEFAULT_ACTOR,
    ) -> TranslationResult:
        """Translate ``text``, preferring the cache, then each provider in turn.

        Raises:
            ValidationError: If text or either language is empty.
            RateLimitExceeded: If every provider was skipped for rate limits.
            TranslationFailed: If no provider produced a translation.
        """
        if not text.strip() or not source_language.strip() or not target_language.strip():
            raise ValidationError("Missing required translation parameters")

        cached = await self._cache.get(text, source_language, target_language)
        if cached is not None:
            logger.info("Using cached translation from %s", cached.translation_source)
            return TranslationResult(
                translated_text=cached.translated_text,
                source=cached.translation_source,
                medical_terms=list(cached.medical_terms),
                cached=True,
            )

        request = TranslationRequest(
            text=text,
            source_language=source_language,
            target_language=target_language,
            actor_id=actor_id,
        )

        rate_limited = 0
        for gateway in self._providers:
            provider_id = gateway.provider_id
            with provider_context(provider_id):
                if not await self._rate_limiter.check(actor_id, provider_id):
                    logger.info("Rate limit reached, skipping provider %s", provider_id)
                    rate_limited += 1
                    continue

                try:
                    result = await gateway.attempt_translate(request)
                except ProviderError as e:
                    logger.warning("Falling back after provider error: %s", e)
                    continue

                await self._consume_token(actor_id, provider_id)
                await self._cache.set(
                    CacheEntry(
                        source_text=text,
                        source_language=source_language,
                        target_language=target_language,
                        translated_text=result.translated_text,
                        translation_source=result.source,
                        medical_terms=list(result.medical_terms),
                    )
                )
                logger.info("Translated with provider %s", provider_id)
                return result

        if self._providers and rate_limited == len(self._providers):
            error: TranslationFailed = RateLimitExceeded(actor_id)
        else:
            error = TranslationFailed("Translation failed with all configured providers")
        await self._record_failure(request, str(error))
        raise error

    async def _consume_token(self, actor_id: str, provider_id: str) -> None:
        try:
            await self._rate_limiter.consume(actor_id, provider_id)
        except RateLimitExceeded:
            # A concurrent request took the last token between check and consume.
            logger.warning("Rate limit bucket already empty after successful call")
        except Exception as e:
            logger.error("Failed to consume rate limit token: %s", e)

    async def _record_failure(self, request: TranslationRequest, message: str) -> None:
        if self._error_log is None:
            return
        try:
            await self._error_log.record(
                request.text, request.source_language, request.target_language, message
            )
        except Exception as e:
            logger.error("Failed to log translation error: %s", e)

    async def aclose(self) -> None:
        """Close every provider client."""
        for gateway in self._providers:
            try:
                await gateway.aclose()
            except Exception as e:
                logger.warning("Failed to close provider %s: %s", gateway.provider_id, e)
