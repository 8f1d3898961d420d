# src/logging/context.py — v2
"""Contextual logging support: attach request_id, actor_id, provider to log records.

Context variables are task-local under asyncio, so concurrent requests never
see each other's values.
"""

from __future__ import annotations

import contextvars
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_actor_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "actor_id", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Snapshot of current logging context."""

    request_id: str | None = None
    actor_id: str | None = None
    provider: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        actor_id=_actor_id.get(),
        provider=_provider.get(),
        step=_step.get(),
    )


def set_request_context(actor_id: str, request_id: str | None = None) -> str:
    """Set request-level context. Returns the request id in effect."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    _actor_id.set(actor_id)
    return rid


def set_step(step: str | None) -> None:
    """Set the pipeline step currently executing (extract, analyze, ...)."""
    _step.set(step)


@contextmanager
def provider_context(provider: str) -> Iterator[None]:
    """Tag log records with a provider id for the duration of a call."""
    token = _provider.set(provider)
    try:
        yield
    finally:
        _provider.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _actor_id.set(None)
    _provider.set(None)
    _step.set(None)
