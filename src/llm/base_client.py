# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from medtranslate.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        json_output: bool = False,
    ) -> LLMResponse:
        """Text completion.

        ``json_output`` asks the provider to emit a single JSON object where
        the API supports it; callers still validate the payload.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (deepseek, openai, anthropic)."""

    async def aclose(self) -> None:
        """Release the underlying HTTP client, if one was created."""
