# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest

from instrctl.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_provider(self):
        s = Settings(_env_file=None)
        assert s.llm_default_provider == "anthropic"
        assert s.llm_classifier_enabled is True

    def test_default_classifier_limits(self):
        s = Settings(_env_file=None)
        assert s.classifier_max_chars == 16_000
        assert s.classifier_max_tokens == 1024
        assert s.classifier_timeout_s == 30.0

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "text"
        assert s.log_file is None


class TestSettingsValidation:
    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="LLM_DEFAULT_PROVIDER"):
            Settings(_env_file=None, llm_default_provider="ollama")

    def test_classifier_assignment_format(self):
        with pytest.raises(ConfigurationError, match="provider:model"):
            Settings(_env_file=None, llm_classifier="gpt-4o")

    def test_non_positive_limit(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, classifier_max_chars=0)


class TestEnvironment:
    def test_anthropic_token_aliases(self, monkeypatch):
        for name in ("ANTHROPIC_API_KEY", "ANTHROPIC_TOKEN", "BAZ_LLM_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("BAZ_TOKEN", "from-baz")
        assert Settings(_env_file=None).anthropic_api_key == "from-baz"

    def test_env_disables_classifier(self, monkeypatch):
        monkeypatch.setenv("LLM_CLASSIFIER_ENABLED", "false")
        assert Settings(_env_file=None).llm_classifier_enabled is False

    def test_api_key_for(self):
        s = Settings(_env_file=None, anthropic_api_key="a", openai_api_key="o")
        assert s.api_key_for("anthropic") == "a"
        assert s.api_key_for("openai") == "o"
        assert s.api_key_for("other") == ""


def test_load_settings_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    s = load_settings(log_level="DEBUG")
    assert s.log_level == "DEBUG"
