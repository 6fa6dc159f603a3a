# src/conflicts/detector.py — v1
"""Conflict detector — find duplicate and contradicting principles.

Identifies:
  - Duplicates: same strength and normalized statement (LOW, non-blocking).
  - Contradictions: MUST vs MUST_NOT over the same normalized statement
    (HIGH, blocking). SHOULD and MAY have no inverse.

Pure function, no LLM call. Ids are C-1..C-n, duplicates first.
"""

from __future__ import annotations

import logging

from instrctl.core.models import (
    Conflict,
    ConflictEvidence,
    ConflictsFile,
    Principle,
)
from instrctl.core.text import normalize_statement

logger = logging.getLogger(__name__)

INVERSE_STRENGTH: dict[str, str] = {"MUST": "MUST_NOT", "MUST_NOT": "MUST"}


def _key(strength: str, principle: Principle) -> str:
    return f"{strength}-{normalize_statement(principle.statement)}"


def _evidence(*principles: Principle) -> list[ConflictEvidence]:
    return [
        ConflictEvidence(doc=source.doc, span=source.span)
        for principle in principles
        for source in principle.sources or []
    ]


def detect_duplicates(principles: list[Principle]) -> list[tuple[Principle, Principle]]:
    """(canonical, duplicate) pairs; the first occurrence is canonical."""
    seen: dict[str, Principle] = {}
    pairs: list[tuple[Principle, Principle]] = []
    for principle in principles:
        key = _key(principle.strength, principle)
        existing = seen.get(key)
        if existing is not None:
            pairs.append((existing, principle))
        else:
            seen[key] = principle
    return pairs


def detect_contradictions(principles: list[Principle]) -> list[tuple[Principle, Principle]]:
    """(earlier, later) pairs with opposing MUST / MUST_NOT strength."""
    recorded: dict[str, Principle] = {}
    pairs: list[tuple[Principle, Principle]] = []
    for principle in principles:
        inverse = INVERSE_STRENGTH.get(principle.strength)
        if inverse is not None:
            candidate = recorded.get(_key(inverse, principle))
            if candidate is not None:
                pairs.append((candidate, principle))
        recorded[_key(principle.strength, principle)] = principle
    return pairs


def build_conflicts(base_commit: str, principles: list[Principle]) -> ConflictsFile:
    """Scan principles (in order) for duplicates and contradictions.

    Args:
        base_commit: Commit the principle set was extracted at.
        principles: Principles in extraction order.

    Returns:
        ConflictsFile with duplicates first, then contradictions.
    """
    conflicts: list[Conflict] = []

    for first, duplicate in detect_duplicates(principles):
        conflicts.append(Conflict(
            conflict_id=f"C-{len(conflicts) + 1}",
            type="DUPLICATE",
            severity="LOW",
            topic=duplicate.title,
            principle_ids=[first.id, duplicate.id],
            overlapping_scope=list(first.scope),
            evidence=_evidence(first, duplicate),
            explanation="Principles share identical normalized text and strength.",
            suggested_resolution="Merge or deduplicate the overlapping principles.",
            blocking=False,
        ))

    for earlier, later in detect_contradictions(principles):
        conflicts.append(Conflict(
            conflict_id=f"C-{len(conflicts) + 1}",
            type="CONTRADICTION",
            severity="HIGH",
            topic=later.title,
            principle_ids=[earlier.id, later.id],
            overlapping_scope=list(later.scope),
            evidence=_evidence(earlier, later),
            explanation="Opposing strengths detected for the same normalized statement.",
            suggested_resolution="Add an override block or consolidate the rules.",
            blocking=True,
        ))

    result = ConflictsFile(base_commit=base_commit, conflicts=conflicts)
    logger.info(
        "Conflict detection: %d principles, %d conflicts (%d blocking)",
        len(principles), len(conflicts), sum(c.blocking for c in conflicts),
    )
    return result
