# src/ratelimit/limiter_factory.py — v1
"""Factory for the process-wide RateLimiter."""

from __future__ import annotations

from medtranslate.config.settings import Settings
from medtranslate.ratelimit.base_state_store import BaseRateLimitStore, MemoryRateLimitStore
from medtranslate.ratelimit.limiter import RateLimiter
from medtranslate.storage.database import Database


def create_rate_limit_store(
    settings: Settings, database: Database | None = None
) -> BaseRateLimitStore:
    """Instantiate the configured rate-limit state backend."""
    if settings.rate_limit_backend == "memory":
        return MemoryRateLimitStore()

    if settings.rate_limit_backend == "sqlite":
        from medtranslate.ratelimit.sqlite_state_store import SqliteRateLimitStore

        if database is None:
            raise ValueError("A database handle is required when RATE_LIMIT_BACKEND=sqlite")
        return SqliteRateLimitStore(database)

    raise ValueError(f"Unsupported rate limit backend: {settings.rate_limit_backend!r}")


def create_rate_limiter(settings: Settings, database: Database | None = None) -> RateLimiter:
    return RateLimiter(
        store=create_rate_limit_store(settings, database),
        policies=settings.rate_limit_policies,
        default_policy=settings.default_rate_limit_policy,
    )
