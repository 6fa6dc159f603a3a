# src/config/settings.py — v1
"""Typed configuration loaded from environment / .env via pydantic-settings.

Single source of truth for deployment-specific settings: the optional LLM
classifier used during extraction and the logging setup of the CLI.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

KNOWN_PROVIDERS: tuple[str, ...] = ("anthropic", "openai")


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent or unparsable."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM CLASSIFIER ===
    llm_classifier_enabled: bool = True
    llm_default_provider: str = "anthropic"
    llm_default_model: str = "claude-3-5-sonnet-latest"
    # Per-component override, "provider:model"
    llm_classifier: str = ""

    # Provider API keys
    anthropic_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "anthropic_api_key", "ANTHROPIC_TOKEN", "BAZ_LLM_TOKEN", "BAZ_TOKEN",
        ),
    )
    openai_api_key: str = ""

    classifier_timeout_s: float = 30.0
    classifier_max_chars: int = 16_000
    classifier_max_tokens: int = 1024

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("classifier_timeout_s", "classifier_max_chars", "classifier_max_tokens")
    @classmethod
    def validate_positive(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.llm_default_provider not in KNOWN_PROVIDERS:
            errors.append(
                f"LLM_DEFAULT_PROVIDER must be one of {', '.join(KNOWN_PROVIDERS)}"
            )

        if self.llm_classifier and ":" not in self.llm_classifier:
            errors.append("LLM_CLASSIFIER must use the form provider:model")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider ('' when unset)."""
        if provider == "anthropic":
            return self.anthropic_api_key
        if provider == "openai":
            return self.openai_api_key
        return ""


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or CLI flags).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
