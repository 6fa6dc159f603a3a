# tests/unit/llm/test_client_factory.py — v1
"""Tests for llm/client_factory.py — provider registry."""

from __future__ import annotations

import pytest

from instrctl.config.settings import Settings
from instrctl.llm.adapters.anthropic_adapter import AnthropicAdapter
from instrctl.llm.adapters.openai_adapter import OpenAIAdapter
from instrctl.llm.client_factory import UnsupportedProviderError, create_llm_client


class TestCreateLLMClient:
    def test_anthropic(self):
        s = Settings(_env_file=None, anthropic_api_key="sk-ant")
        client = create_llm_client("anthropic", "claude-3-5-haiku-latest", s)
        assert isinstance(client, AnthropicAdapter)
        assert client.provider_name == "anthropic"
        assert client._api_key == "sk-ant"

    def test_openai(self):
        s = Settings(_env_file=None, openai_api_key="sk-oai")
        client = create_llm_client("openai", "gpt-4o-mini", s)
        assert isinstance(client, OpenAIAdapter)
        assert client._api_key == "sk-oai"

    def test_explicit_key_wins(self):
        s = Settings(_env_file=None, anthropic_api_key="from-settings")
        client = create_llm_client("anthropic", "m", s, api_key="explicit")
        assert client._api_key == "explicit"

    def test_unsupported(self):
        with pytest.raises(UnsupportedProviderError, match="ollama"):
            create_llm_client("ollama", "llama3")
