# src/core/errors.py — v1
"""Error taxonomy shared by every pipeline stage.

Surfaced to callers: ValidationError, UnsupportedFileType, ExtractionError,
StorageError, TranslationFailed (and its RateLimitExceeded subclass).
Handled internally: ProviderError (triggers fallback), CacheError (logged).
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all request-scoped pipeline failures."""


class ValidationError(PipelineError):
    """Malformed translation request (empty text or language)."""


class UnsupportedFileType(PipelineError):
    """Uploaded file has a MIME type with no extractor."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(
            f"Unsupported file type: {mime_type!r}. "
            "Expected application/pdf or image/*"
        )


class ExtractionError(PipelineError):
    """Text could not be extracted from an uploaded file."""


class ProviderError(PipelineError):
    """A single provider call failed (network, timeout, status, payload)."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"Provider '{provider}' failed: {reason}")


class CacheError(PipelineError):
    """Persistent cache tier could not be read or written."""


class StorageError(PipelineError):
    """Document store could not be read or written."""


class TranslationFailed(PipelineError):
    """No configured provider produced a translation."""


class RateLimitExceeded(TranslationFailed):
    """Rate-limit quota exhausted.

    Raised by RateLimiter.consume() when no token is left, and by the
    orchestrator when every provider was skipped for rate limits.
    """

    def __init__(self, actor_id: str, provider_id: str | None = None):
        self.actor_id = actor_id
        self.provider_id = provider_id
        if provider_id is None:
            message = f"Rate limit exceeded for actor '{actor_id}' on all providers"
        else:
            message = f"Rate limit exceeded for actor '{actor_id}' on '{provider_id}'"
        super().__init__(message)
