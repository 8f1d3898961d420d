# src/llm/adapters/anthropic_adapter.py — v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK. The Messages API has no JSON mode, so
``json_output`` relies on the system prompt and caller-side validation.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from medtranslate.llm.base_client import BaseLLMClient
from medtranslate.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-3-5-haiku-latest",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            import anthropic

            self.__client = anthropic.AsyncAnthropic(
                api_key=self._api_key or "", max_retries=0,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        json_output: bool = False,
    ) -> LLMResponse:
        """Text completion via Anthropic Messages API."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [self._to_api_message(m) for m in messages],
        }
        if system:
            kwargs["system"] = system

        start = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider="anthropic",
            latency_ms=latency_ms,
            raw_response=response,
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    async def aclose(self) -> None:
        if self.__client is not None:
            await self.__client.close()
            self.__client = None

    @staticmethod
    def _to_api_message(m: Message) -> dict[str, Any]:
        return {"role": m.role, "content": m.content}

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Concatenate text blocks from an Anthropic response."""
        return "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )
