# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a scripted LLM client, a controllable clock, an in-memory database
and a fake OCR engine. No network or Tesseract binary is needed.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from medtranslate.extraction.ocr_engine import OcrEngine
from medtranslate.llm.base_client import BaseLLMClient
from medtranslate.llm.models import LLMResponse, Message
from medtranslate.storage.database import IN_MEMORY, Database


# === FAKES ===


class FakeLLMClient(BaseLLMClient):
    """LLM client that replays scripted replies.

    Each item in ``replies`` is returned as response content, or raised if
    it is an exception. The last item repeats once the script runs out.
    """

    def __init__(
        self,
        replies: list[str | BaseException] | None = None,
        provider: str = "fake",
        delay_s: float = 0.0,
    ) -> None:
        self._replies = list(replies or ["translated"])
        self._provider = provider
        self._delay_s = delay_s
        self.calls: list[dict] = []
        self.closed = False

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1000,
        temperature: float = 0.3,
        json_output: bool = False,
    ) -> LLMResponse:
        self.calls.append(
            {
                "messages": messages,
                "system": system,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "json_output": json_output,
            }
        )
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return LLMResponse(content=reply, model="fake-model", provider=self._provider)

    @property
    def provider_name(self) -> str:
        return self._provider

    async def aclose(self) -> None:
        self.closed = True


class FakeOcrEngine(OcrEngine):
    """OCR engine returning fixed text and remembering the paths it saw."""

    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self._text = text
        self._error = error
        self.seen_paths: list[Path] = []
        self.close_calls = 0

    async def recognize(self, image_path: Path) -> str:
        self.seen_paths.append(image_path)
        assert image_path.exists()
        if self._error is not None:
            raise self._error
        return self._text

    async def close(self) -> None:
        self.close_calls += 1


class FakeClock:
    """Callable clock advanced by hand."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


# === FIXTURES ===


@pytest.fixture
def database():
    """Open in-memory SQLite database, closed after the test."""
    db = Database(IN_MEMORY).open()
    yield db
    db.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_ocr() -> FakeOcrEngine:
    return FakeOcrEngine(text="Hypertension noted.")


@pytest.fixture
def make_llm():
    """Factory for FakeLLMClient instances."""
    return FakeLLMClient


@pytest.fixture
def make_gateway():
    """Factory: ProviderGateway over a FakeLLMClient; returns (gateway, client)."""
    from medtranslate.translation.gateway import ProviderGateway

    def _make(
        provider_id: str,
        replies: list[str | BaseException] | None = None,
        timeout_s: float = 30.0,
        delay_s: float = 0.0,
    ):
        client = FakeLLMClient(replies, provider=provider_id, delay_s=delay_s)
        return ProviderGateway(provider_id, client, timeout_s=timeout_s), client

    return _make


@pytest.fixture
def make_ocr():
    """Factory for FakeOcrEngine instances."""
    return FakeOcrEngine
