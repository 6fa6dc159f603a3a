# src/extraction/extractor.py — v1
"""Extraction orchestrator: classifier first, heuristic fallback.

The managed section of a document is masked before either path runs so
that rendered principles are never re-extracted as new ones.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from instrctl.core.models import Occurrence, Principle, PrincipleSource, Span
from instrctl.core.text import (
    infer_title,
    new_principle_id,
    principle_fingerprint,
    sha256_text,
)
from instrctl.extraction.heuristic import extract_heuristic
from instrctl.extraction.models import ClassifiedPrinciple, ExtractResult
from instrctl.logging.context import document_scope
from instrctl.pipeline.managed_section import mask_managed_section

if TYPE_CHECKING:
    from instrctl.extraction.classifier import PrincipleClassifier

logger = logging.getLogger(__name__)


def _resolve_span(item: ClassifiedPrinciple, lines: list[str]) -> Span:
    """Payload line numbers, else first line containing the statement, else 1."""
    start = item.start_line
    if start is None or start < 1:
        start = next(
            (i for i, line in enumerate(lines, start=1) if item.statement in line), 1,
        )
    end = item.end_line if item.end_line is not None and item.end_line >= start else start
    return Span(start_line=start, end_line=end)


def _from_classified(
    doc_path: str,
    items: tuple[ClassifiedPrinciple, ...],
    text: str,
    default_scope: list[str],
) -> ExtractResult:
    lines = text.split("\n")
    principles: list[Principle] = []
    occurrences: list[Occurrence] = []
    for item in items:
        span = _resolve_span(item, lines)
        raw = "\n".join(lines[span.start_line - 1 : span.end_line]) or item.statement
        principle = Principle(
            id=new_principle_id(),
            title=item.title or infer_title(item.statement),
            strength=item.strength,
            statement=item.statement,
            scope=list(default_scope),
            tags=item.tags,
            rationale=item.rationale,
            examples=item.examples,
            sources=[PrincipleSource(doc=doc_path, span=span, raw_text_hash=sha256_text(raw))],
            fingerprint=principle_fingerprint(item.strength, item.statement),
        )
        principles.append(principle)
        occurrences.append(Occurrence(principle_id=principle.id, doc=doc_path, span=span))
    return ExtractResult(principles=principles, occurrences=occurrences, method="classifier")


async def extract_principles(
    doc_path: str,
    content: str,
    default_scope: list[str],
    classifier: PrincipleClassifier | None = None,
) -> ExtractResult:
    """Extract principles from one document.

    Args:
        doc_path: Repository-relative document path (recorded in sources).
        content: Full document text.
        default_scope: Scope assigned to every extracted principle.
        classifier: Optional LLM classifier; any failure falls back to
            the heuristic extractor with a warning.

    Returns:
        ExtractResult with principles in source order.
    """
    text = mask_managed_section(content)
    with document_scope(doc_path):
        if classifier is not None:
            outcome = await classifier.classify(doc_path, text)
            if outcome.ok:
                result = _from_classified(doc_path, outcome.principles, text, default_scope)
                logger.debug("Classified %d principles in %s", len(result.principles), doc_path)
                return result
            logger.warning(
                "LLM extraction failed; falling back to heuristic parser (%s: %s)",
                outcome.error.kind if outcome.error else "empty",
                outcome.error.message if outcome.error else "no principles",
            )

        principles, occurrences = extract_heuristic(doc_path, text, default_scope)
        logger.debug("Heuristic extraction found %d principles in %s", len(principles), doc_path)
        return ExtractResult(principles=principles, occurrences=occurrences, method="heuristic")
