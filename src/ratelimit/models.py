# src/ratelimit/models.py — v1
"""Rate-limit domain models: RateLimitPolicy, RateLimitState."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class RateLimitPolicy:
    """Token-bucket quota: ``capacity`` calls per ``window_s`` seconds."""

    capacity: int
    window_s: float

    @property
    def window(self) -> timedelta:
        return timedelta(seconds=self.window_s)


class RateLimitState(BaseModel):
    """Bucket for one (actor, provider) pair."""

    actor_id: str
    provider_id: str
    tokens_remaining: int = Field(ge=0)
    last_refill: datetime

    def is_expired(self, now: datetime, policy: RateLimitPolicy) -> bool:
        """Whether the window has elapsed and the bucket is due for refill."""
        return now - self.last_refill >= policy.window

    @classmethod
    def full(
        cls, actor_id: str, provider_id: str, policy: RateLimitPolicy, now: datetime
    ) -> RateLimitState:
        """Freshly refilled bucket whose window starts at ``now``."""
        return cls(
            actor_id=actor_id,
            provider_id=provider_id,
            tokens_remaining=policy.capacity,
            last_refill=now,
        )
