# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: provider
credentials and priority, rate-limit policies, cache sizing, storage, OCR
and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from medtranslate.ratelimit.models import RateLimitPolicy

KNOWN_PROVIDERS: tuple[str, ...] = ("deepseek", "openai", "anthropic")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === PROVIDERS ===
    # Comma-separated, highest priority first.
    provider_order: str = "deepseek,openai"
    provider_timeout_s: float = 30.0
    provider_max_tokens: int = 1000
    provider_temperature: float = 0.3

    deepseek_api_key: str = ""
    deepseek_model: str = "deepseek-chat"
    deepseek_base_url: str = "https://api.deepseek.com/v1"

    openai_api_key: str = ""
    openai_model: str = "gpt-3.5-turbo"

    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"

    # === RATE LIMITS (tokens per window) ===
    rate_limit_backend: Literal["memory", "sqlite"] = "sqlite"
    rate_limit_deepseek_capacity: int = 100
    rate_limit_deepseek_window_s: float = 3600.0
    rate_limit_openai_capacity: int = 50
    rate_limit_openai_window_s: float = 3600.0
    rate_limit_anthropic_capacity: int = 50
    rate_limit_anthropic_window_s: float = 3600.0
    # Applies to providers without their own policy.
    rate_limit_default_capacity: int = 10
    rate_limit_default_window_s: float = 60.0

    # === Cache ===
    cache_backend: Literal["memory", "sqlite"] = "sqlite"
    cache_memory_max_entries: int = 1000

    # === Storage ===
    database_path: Path = Path("~/.medtranslate/medtranslate.db")
    search_similarity_threshold: float = 0.3
    search_max_results: int = 20

    # === Extraction ===
    ocr_language: str = "eng"
    tesseract_cmd: str = ""
    ocr_timeout_s: float = 60.0

    # === Analysis ===
    keyword_limit: int = 10
    summary_max_sentences: int = 3

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator(
        "rate_limit_deepseek_capacity",
        "rate_limit_openai_capacity",
        "rate_limit_anthropic_capacity",
        "rate_limit_default_capacity",
        "cache_memory_max_entries",
        "keyword_limit",
        "summary_max_sentences",
    )
    @classmethod
    def validate_positive_int(cls, v: int, info) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator(
        "rate_limit_deepseek_window_s",
        "rate_limit_openai_window_s",
        "rate_limit_anthropic_window_s",
        "rate_limit_default_window_s",
        "provider_timeout_s",
        "ocr_timeout_s",
    )
    @classmethod
    def validate_positive_duration(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        unknown = [p for p in self.provider_order_list if p not in KNOWN_PROVIDERS]
        if unknown:
            errors.append(
                f"PROVIDER_ORDER contains unknown providers: {', '.join(unknown)} "
                f"(known: {', '.join(KNOWN_PROVIDERS)})"
            )

        if len(set(self.provider_order_list)) != len(self.provider_order_list):
            errors.append("PROVIDER_ORDER lists a provider more than once")

        if not 0.0 <= self.search_similarity_threshold <= 1.0:
            errors.append("SEARCH_SIMILARITY_THRESHOLD must be within [0, 1]")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def provider_order_list(self) -> list[str]:
        """Parse comma-separated provider priority list."""
        return [p.strip() for p in self.provider_order.split(",") if p.strip()]

    @property
    def rate_limit_policies(self) -> dict[str, RateLimitPolicy]:
        """Per-provider token-bucket policies."""
        return {
            name: RateLimitPolicy(
                capacity=getattr(self, f"rate_limit_{name}_capacity"),
                window_s=getattr(self, f"rate_limit_{name}_window_s"),
            )
            for name in KNOWN_PROVIDERS
        }

    @property
    def default_rate_limit_policy(self) -> RateLimitPolicy:
        return RateLimitPolicy(
            capacity=self.rate_limit_default_capacity,
            window_s=self.rate_limit_default_window_s,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-deployment config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
