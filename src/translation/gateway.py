# src/translation/gateway.py — v1
"""Provider gateway: one uniform translate capability per LLM back-end.

Every failure mode of a provider call (network error, timeout, non-2xx
status raised by the SDK, empty or malformed reply) is reported as
ProviderError so the orchestrator can fall back to the next provider.
Cancellation is not a failure and propagates unchanged.
"""

from __future__ import annotations

import asyncio
import logging

from medtranslate.config.settings import Settings
from medtranslate.core.errors import ProviderError
from medtranslate.core.models import TranslationRequest, TranslationResult
from medtranslate.llm.base_client import BaseLLMClient
from medtranslate.llm.client_factory import create_llm_client
from medtranslate.llm.models import Message
from medtranslate.translation.prompts import (
    build_system_prompt,
    is_simplification,
    parse_simplification,
)

logger = logging.getLogger(__name__)


class ProviderGateway:
    """Wraps an LLM client with the medical-translation contract."""

    def __init__(
        self,
        provider_id: str,
        client: BaseLLMClient,
        timeout_s: float = 30.0,
        max_tokens: int = 1000,
        temperature: float = 0.3,
    ) -> None:
        self._provider_id = provider_id
        self._client = client
        self._timeout_s = timeout_s
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def provider_id(self) -> str:
        return self._provider_id

    async def attempt_translate(self, request: TranslationRequest) -> TranslationResult:
        """Ask the provider for a translation.

        Raises:
            ProviderError: On any provider-side failure, including timeout.
        """
        simplify = is_simplification(request.source_language, request.target_language)
        try:
            response = await asyncio.wait_for(
                self._client.complete(
                    [Message(role="user", content=request.text)],
                    system=build_system_prompt(
                        request.source_language, request.target_language
                    ),
                    max_tokens=self._max_tokens,
                    temperature=self._temperature,
                    json_output=simplify,
                ),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(
                self._provider_id, f"timed out after {self._timeout_s:.0f}s"
            ) from e
        except Exception as e:
            raise ProviderError(self._provider_id, f"{type(e).__name__}: {e}") from e

        content = response.content.strip()
        if not content:
            raise ProviderError(self._provider_id, "response has no generated text")

        if not simplify:
            return TranslationResult(translated_text=content, source=self._provider_id)

        try:
            payload = parse_simplification(content)
        except ValueError as e:
            raise ProviderError(self._provider_id, f"malformed response: {e}") from e
        return TranslationResult(
            translated_text=payload.simplified_text,
            source=self._provider_id,
            medical_terms=payload.medical_terms,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _model_for(provider: str, settings: Settings) -> str:
    return getattr(settings, f"{provider}_model")


def _api_key_for(provider: str, settings: Settings) -> str:
    return getattr(settings, f"{provider}_api_key", "")


def build_gateways(settings: Settings) -> list[ProviderGateway]:
    """Build gateways in PROVIDER_ORDER, skipping providers without an API key."""
    gateways: list[ProviderGateway] = []
    for provider in settings.provider_order_list:
        if not _api_key_for(provider, settings):
            logger.warning("No API key configured for provider %s; skipping it", provider)
            continue
        client = create_llm_client(provider, _model_for(provider, settings), settings)
        gateways.append(
            ProviderGateway(
                provider,
                client,
                timeout_s=settings.provider_timeout_s,
                max_tokens=settings.provider_max_tokens,
                temperature=settings.provider_temperature,
            )
        )
    if not gateways:
        logger.error("No translation providers configured; translations will fail")
    return gateways
