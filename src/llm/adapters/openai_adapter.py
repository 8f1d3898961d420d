# src/llm/adapters/openai_adapter.py — v2
"""OpenAI chat-completions adapter implementing BaseLLMClient.

Uses the official openai SDK. Also serves OpenAI-compatible APIs such as
DeepSeek by pointing ``base_url`` at them.
"""

from __future__ import annotations

import time
from typing import Any

from medtranslate.llm.base_client import BaseLLMClient
from medtranslate.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """Adapter for OpenAI and OpenAI-compatible chat models."""

    def __init__(
        self,
        model: str = "gpt-3.5-turbo",
        api_key: str = "",
        base_url: str | None = None,
        provider: str = "openai",
        **kwargs: Any,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._base_url = base_url or None
        self._provider = provider
        self.__client = None  # Lazy initialization

    @property
    def _client(self):
        """Lazy-init OpenAI client (only on first API call)."""
        if self.__client is None:
            import openai

            # Fallback to the next provider replaces SDK-level retries.
            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key, base_url=self._base_url, max_retries=0,
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
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": oai_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_output:
            kwargs["response_format"] = {"type": "json_object"}

        t0 = time.monotonic()
        resp = await self._client.chat.completions.create(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        content = ""
        if resp.choices:
            content = resp.choices[0].message.content or ""
        usage = resp.usage
        return LLMResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider=self._provider,
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return self._provider

    async def aclose(self) -> None:
        if self.__client is not None:
            await self.__client.close()
            self.__client = None
