# src/extraction/classifier.py — v1
"""LLM-backed principle classifier.

Sends (truncated) document text to the configured provider and parses a
strict JSON payload. classify() never raises: transport failures,
timeouts, malformed JSON and empty payloads come back as a
ClassifierOutcome carrying a ClassifierError, and the caller falls back
to the heuristic extractor.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from instrctl.core.models import STRENGTHS
from instrctl.extraction.models import (
    ClassifierError,
    ClassifierOutcome,
    ClassifierResponse,
)
from instrctl.llm.client_factory import create_llm_client
from instrctl.llm.config import resolve_llm
from instrctl.llm.models import Message

if TYPE_CHECKING:
    from instrctl.config.settings import Settings
    from instrctl.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are assisting instrctl, a tool that manages instruction documents "
    "in repositories."
)

_INSTRUCTIONS = (
    "Extract individual normative principles from the following document "
    "and respond with strict JSON only.\n"
    "For each principle provide: strength (MUST, MUST_NOT, SHOULD, MAY), "
    "statement (the requirement without the modal keyword), optional title, "
    "tags, rationale, examples, and source line numbers start_line/end_line.\n"
    "Do not invent requirements; only split atomic rules present in the text. "
    "Keep statements succinct and literal.\n"
    'Return the JSON payload in the form { "principles": [ ... ] } with no '
    "trailing commentary."
)


def build_prompt(doc_path: str, text: str, max_chars: int) -> str:
    excerpt = text[:max_chars]
    return f"{_INSTRUCTIONS}\n\nDocument path: {doc_path}\n\n{excerpt}"


def _strip_code_fences(content: str) -> str:
    text = content.strip()
    if text.startswith("```"):
        lines = [ln for ln in text.split("\n") if not ln.strip().startswith("```")]
        text = "\n".join(lines)
    return text


class PrincipleClassifier:
    """Extract principles from a document with an LLM."""

    def __init__(
        self,
        client: BaseLLMClient,
        timeout_s: float = 30.0,
        max_chars: int = 16_000,
        max_tokens: int = 1024,
    ) -> None:
        self._client = client
        self._timeout_s = timeout_s
        self._max_chars = max_chars
        self._max_tokens = max_tokens

    @property
    def provider_name(self) -> str:
        return self._client.provider_name

    async def classify(self, doc_path: str, text: str) -> ClassifierOutcome:
        """Classify one document; errors are returned, not raised."""
        prompt = build_prompt(doc_path, text, self._max_chars)
        try:
            response = await asyncio.wait_for(
                self._client.complete(
                    messages=[Message(role="user", content=prompt)],
                    system=SYSTEM_PROMPT,
                    max_tokens=self._max_tokens,
                    temperature=0.0,
                    response_format=ClassifierResponse,
                ),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError:
            return ClassifierOutcome(error=ClassifierError(
                "timeout", f"no response within {self._timeout_s}s",
            ))
        except Exception as exc:  # provider SDKs raise many unrelated types
            return ClassifierOutcome(error=ClassifierError("transport", str(exc)))

        try:
            payload = ClassifierResponse.model_validate(
                json.loads(_strip_code_fences(response.content))
            )
        except (json.JSONDecodeError, ValidationError) as exc:
            return ClassifierOutcome(error=ClassifierError("parse", str(exc)))

        usable = tuple(
            p for p in payload.principles if p.strength in STRENGTHS and p.statement
        )
        if not usable:
            return ClassifierOutcome(error=ClassifierError(
                "empty", "classifier returned no usable principles",
            ))
        logger.debug(
            "Classifier returned %d principles for %s (%d dropped)",
            len(usable), doc_path, len(payload.principles) - len(usable),
        )
        return ClassifierOutcome(principles=usable)


def build_classifier(settings: Settings) -> PrincipleClassifier | None:
    """Create the classifier from settings, None when it cannot run.

    The classifier is disabled by LLM_CLASSIFIER_ENABLED=false or when
    the resolved provider has no API key.
    """
    if not settings.llm_classifier_enabled:
        logger.debug("LLM classifier disabled by configuration")
        return None
    assignment = resolve_llm("classifier", settings)
    if not settings.api_key_for(assignment.provider):
        logger.debug("No API key for %s; using heuristic extraction", assignment.provider)
        return None
    client = create_llm_client(assignment.provider, assignment.model, settings)
    logger.info("LLM classifier: %s (source=%s)", assignment.key, assignment.source)
    return PrincipleClassifier(
        client,
        timeout_s=settings.classifier_timeout_s,
        max_chars=settings.classifier_max_chars,
        max_tokens=settings.classifier_max_tokens,
    )
