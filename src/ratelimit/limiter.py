# src/ratelimit/limiter.py — v1
"""Token-bucket rate limiter with lazy refill, keyed by (actor, provider).

check() and consume() are deliberately separate: callers check before
attempting a provider and consume only after it succeeded. Two concurrent
requests from the same actor can both pass check() before either consumes;
the resulting overshoot is tolerated because the limiter shapes traffic
rather than enforcing a security boundary.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from medtranslate.core.errors import RateLimitExceeded
from medtranslate.core.models import utcnow
from medtranslate.ratelimit.base_state_store import BaseRateLimitStore
from medtranslate.ratelimit.models import RateLimitPolicy, RateLimitState

logger = logging.getLogger(__name__)

_DEFAULT_POLICY = RateLimitPolicy(capacity=10, window_s=60.0)


class RateLimiter:
    """Per-provider quotas tracked per actor."""

    def __init__(
        self,
        store: BaseRateLimitStore,
        policies: dict[str, RateLimitPolicy] | None = None,
        default_policy: RateLimitPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._policies = dict(policies or {})
        self._default_policy = default_policy or _DEFAULT_POLICY
        self._clock = clock

    def policy_for(self, provider_id: str) -> RateLimitPolicy:
        """Quota configured for a provider, or the default policy."""
        return self._policies.get(provider_id, self._default_policy)

    async def check(self, actor_id: str, provider_id: str) -> bool:
        """Whether the actor may call the provider now.

        A missing or expired bucket is refilled (and persisted) on read.
        Store failures are logged and answer False so the caller falls
        through to the next provider.
        """
        try:
            state = await self._current_state(actor_id, provider_id)
        except Exception as e:
            logger.error(
                "Rate limit check failed for %s/%s: %s", actor_id, provider_id, e
            )
            return False
        return state.tokens_remaining > 0

    async def consume(self, actor_id: str, provider_id: str) -> int:
        """Take one token after a successful provider call.

        Returns:
            Tokens left in the current window.

        Raises:
            RateLimitExceeded: If the bucket is already empty.
        """
        state = await self._current_state(actor_id, provider_id)
        if state.tokens_remaining <= 0:
            raise RateLimitExceeded(actor_id, provider_id)
        state.tokens_remaining -= 1
        await self._store.put(state)
        logger.debug(
            "Consumed token for %s/%s, %d left",
            actor_id, provider_id, state.tokens_remaining,
        )
        return state.tokens_remaining

    async def remaining(self, actor_id: str, provider_id: str) -> int:
        """Tokens available now, without touching the store."""
        state = await self._store.get(actor_id, provider_id)
        policy = self.policy_for(provider_id)
        if state is None or state.is_expired(self._clock(), policy):
            return policy.capacity
        return state.tokens_remaining

    async def _current_state(self, actor_id: str, provider_id: str) -> RateLimitState:
        """Load the bucket, refilling and persisting it if fresh or expired."""
        policy = self.policy_for(provider_id)
        now = self._clock()
        state = await self._store.get(actor_id, provider_id)
        if state is None or state.is_expired(now, policy):
            state = RateLimitState.full(actor_id, provider_id, policy, now)
            await self._store.put(state)
        return state
