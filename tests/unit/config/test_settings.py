# tests/unit/config/test_settings.py — v1
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from medtranslate.config.settings import ConfigurationError, Settings, load_settings
from medtranslate.ratelimit.models import RateLimitPolicy


class TestSettingsDefaults:
    def test_default_providers(self):
        s = Settings(_env_file=None, provider_order="deepseek,openai")
        assert s.provider_order_list == ["deepseek", "openai"]
        assert s.provider_timeout_s == 30.0

    def test_default_rate_limits(self):
        s = Settings(
            _env_file=None,
            rate_limit_deepseek_capacity=100,
            rate_limit_openai_capacity=50,
        )
        policies = s.rate_limit_policies
        assert policies["deepseek"] == RateLimitPolicy(capacity=100, window_s=3600.0)
        assert policies["openai"] == RateLimitPolicy(capacity=50, window_s=3600.0)
        assert s.default_rate_limit_policy == RateLimitPolicy(capacity=10, window_s=60.0)

    def test_default_cache_and_storage(self):
        s = Settings(_env_file=None)
        assert s.cache_memory_max_entries == 1000
        assert s.search_similarity_threshold == 0.3
        assert s.database_path == Path("~/.medtranslate/medtranslate.db")

    def test_provider_order_whitespace(self):
        s = Settings(_env_file=None, provider_order=" openai , anthropic ,")
        assert s.provider_order_list == ["openai", "anthropic"]

    def test_load_settings_overrides(self):
        s = load_settings(_env_file=None, keyword_limit=5)
        assert s.keyword_limit == 5

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("PROVIDER_ORDER", "anthropic")
        monkeypatch.setenv("CACHE_MEMORY_MAX_ENTRIES", "42")
        s = Settings(_env_file=None)
        assert s.provider_order_list == ["anthropic"]
        assert s.cache_memory_max_entries == 42


class TestSettingsValidation:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="unknown providers"):
            Settings(_env_file=None, provider_order="deepseek,gemini")

    def test_duplicate_provider(self):
        with pytest.raises(ConfigurationError, match="more than once"):
            Settings(_env_file=None, provider_order="openai,openai")

    def test_threshold_out_of_range(self):
        with pytest.raises(ConfigurationError, match="SIMILARITY_THRESHOLD"):
            Settings(_env_file=None, search_similarity_threshold=1.5)

    def test_zero_capacity(self):
        with pytest.raises(ValueError, match="rate_limit_openai_capacity"):
            Settings(_env_file=None, rate_limit_openai_capacity=0)

    def test_zero_cache_size(self):
        with pytest.raises(ValueError, match="cache_memory_max_entries"):
            Settings(_env_file=None, cache_memory_max_entries=0)

    def test_negative_window(self):
        with pytest.raises(ValueError, match="rate_limit_default_window_s"):
            Settings(_env_file=None, rate_limit_default_window_s=-1)

    def test_invalid_backend(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache_backend="redis")
