# src/ratelimit/base_state_store.py — v1
"""Abstract storage for rate-limit buckets."""

from __future__ import annotations

from abc import ABC, abstractmethod

from medtranslate.ratelimit.models import RateLimitState


class BaseRateLimitStore(ABC):
    """Unified interface for rate-limit state backends."""

    @abstractmethod
    async def get(self, actor_id: str, provider_id: str) -> RateLimitState | None:
        """Retrieve the bucket for an (actor, provider) pair."""

    @abstractmethod
    async def put(self, state: RateLimitState) -> None:
        """Store a bucket (upsert on the (actor, provider) pair)."""


class MemoryRateLimitStore(BaseRateLimitStore):
    """In-process store; state is lost on restart."""

    def __init__(self) -> None:
        self._states: dict[tuple[str, str], RateLimitState] = {}

    async def get(self, actor_id: str, provider_id: str) -> RateLimitState | None:
        state = self._states.get((actor_id, provider_id))
        return state.model_copy() if state is not None else None

    async def put(self, state: RateLimitState) -> None:
        self._states[(state.actor_id, state.provider_id)] = state.model_copy()
