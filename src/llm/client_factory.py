# src/llm/client_factory.py — v3
"""Factory: build an LLM client for a configured provider name.

DeepSeek speaks the OpenAI wire protocol, so it shares the OpenAI adapter
with its own base URL and provider label.
"""

from __future__ import annotations

import importlib
import logging

from medtranslate.config.settings import Settings
from medtranslate.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

_OPENAI_ADAPTER = "medtranslate.llm.adapters.openai_adapter.OpenAIAdapter"
_ANTHROPIC_ADAPTER = "medtranslate.llm.adapters.anthropic_adapter.AnthropicAdapter"

# provider -> (adapter class path, settings attribute per constructor kwarg)
_PROVIDERS: dict[str, tuple[str, dict[str, str]]] = {
    "deepseek": (
        _OPENAI_ADAPTER,
        {"api_key": "deepseek_api_key", "base_url": "deepseek_base_url"},
    ),
    "openai": (_OPENAI_ADAPTER, {"api_key": "openai_api_key"}),
    "anthropic": (_ANTHROPIC_ADAPTER, {"api_key": "anthropic_api_key"}),
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider name has no adapter."""


def create_llm_client(
    provider: str,
    model: str,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the adapter for ``provider``.

    Explicit ``kwargs`` win over values read from ``settings``.

    Raises:
        UnsupportedProviderError: If provider is unknown.
    """
    try:
        class_path, credential_fields = _PROVIDERS[provider]
    except KeyError:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r} "
            f"(known: {', '.join(registered_providers())})"
        ) from None

    init_kwargs = {"model": model, **kwargs}
    if class_path == _OPENAI_ADAPTER:
        init_kwargs.setdefault("provider", provider)
    if settings is not None:
        for kwarg, attr in credential_fields.items():
            init_kwargs.setdefault(kwarg, getattr(settings, attr))

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    module_path, class_name = class_path.rsplit(".", 1)
    adapter_cls = getattr(importlib.import_module(module_path), class_name)
    return adapter_cls(**init_kwargs)


def registered_providers() -> list[str]:
    return sorted(_PROVIDERS)
