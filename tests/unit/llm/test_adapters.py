# tests/unit/llm/test_adapters.py — v1
"""Tests for llm/client_factory.py and the SDK adapters (SDK clients mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from medtranslate.config.settings import Settings
from medtranslate.llm.adapters.anthropic_adapter import AnthropicAdapter
from medtranslate.llm.adapters.openai_adapter import OpenAIAdapter
from medtranslate.llm.client_factory import (
    UnsupportedProviderError,
    create_llm_client,
    registered_providers,
)
from medtranslate.llm.models import Message


def _openai_response(content: str | None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=5),
    )


def _anthropic_response(*texts: str):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts]
        + [SimpleNamespace(type="tool_use")],
        usage=SimpleNamespace(input_tokens=7, output_tokens=3),
        model="claude-test",
    )


class TestClientFactory:
    def test_registered_providers(self):
        assert {"deepseek", "openai", "anthropic"} <= set(registered_providers())

    def test_unknown_provider(self):
        with pytest.raises(UnsupportedProviderError):
            create_llm_client("gemini", "model")

    def test_deepseek_uses_openai_adapter_with_base_url(self):
        settings = Settings(
            _env_file=None,
            deepseek_api_key="ds-key",
            deepseek_base_url="https://api.deepseek.com/v1",
        )
        client = create_llm_client("deepseek", "deepseek-chat", settings)
        assert isinstance(client, OpenAIAdapter)
        assert client.provider_name == "deepseek"
        assert client._base_url == "https://api.deepseek.com/v1"
        assert client._api_key == "ds-key"

    def test_anthropic(self):
        settings = Settings(_env_file=None, anthropic_api_key="ant-key")
        client = create_llm_client("anthropic", "claude-test", settings)
        assert isinstance(client, AnthropicAdapter)
        assert client.provider_name == "anthropic"


class TestOpenAIAdapter:
    @pytest.mark.asyncio
    async def test_complete_builds_request(self):
        adapter = OpenAIAdapter(model="gpt-test", api_key="k")
        create = AsyncMock(return_value=_openai_response("Hola"))
        adapter._OpenAIAdapter__client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )

        response = await adapter.complete(
            [Message(role="user", content="Hello")],
            system="Translate",
            max_tokens=100,
            temperature=0.1,
            json_output=True,
        )
        assert response.content == "Hola"
        assert response.input_tokens == 12
        assert response.provider == "openai"

        kwargs = create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "Translate"}
        assert kwargs["messages"][1] == {"role": "user", "content": "Hello"}
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["max_tokens"] == 100

    @pytest.mark.asyncio
    async def test_null_content_is_empty(self):
        adapter = OpenAIAdapter()
        create = AsyncMock(return_value=_openai_response(None))
        adapter._OpenAIAdapter__client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )
        response = await adapter.complete([Message(role="user", content="Hi")])
        assert response.content == ""
        assert "response_format" not in create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_aclose_without_client(self):
        await OpenAIAdapter().aclose()


class TestAnthropicAdapter:
    @pytest.mark.asyncio
    async def test_complete_concatenates_text_blocks(self):
        adapter = AnthropicAdapter(model="claude-test", api_key="k")
        create = AsyncMock(return_value=_anthropic_response("Hola ", "mundo"))
        adapter._AnthropicAdapter__client = SimpleNamespace(
            messages=SimpleNamespace(create=create)
        )

        response = await adapter.complete(
            [Message(role="user", content="Hello world")], system="Translate"
        )
        assert response.content == "Hola mundo"
        assert response.output_tokens == 3
        assert create.call_args.kwargs["system"] == "Translate"

    @pytest.mark.asyncio
    async def test_aclose_closes_sdk_client(self):
        adapter = AnthropicAdapter()
        close = AsyncMock()
        adapter._AnthropicAdapter__client = SimpleNamespace(close=close)
        await adapter.aclose()
        close.assert_awaited_once()
