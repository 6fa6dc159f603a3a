# src/llm/base_client.py — v2
"""Abstract LLM client interface used by the principle classifier."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from instrctl.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion, optionally constrained to a JSON schema."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (anthropic, openai)."""
