# src/extraction/heuristic.py — v1
"""Line-based modal-keyword extractor (the deterministic fallback).

A line yields a principle when, after stripping a leading list marker,
backticks and bold markers, it contains MUST NOT, MUST, SHOULD or MAY
(case-insensitive). The text after the keyword becomes the statement.
"""

from __future__ import annotations

import re

from instrctl.core.models import Occurrence, Principle, PrincipleSource, Span
from instrctl.core.text import (
    infer_title,
    new_principle_id,
    normalize_statement,
    principle_fingerprint,
    sha256_text,
)

_LIST_MARKER_RE = re.compile(r"^[-*]\s*")
_MODAL_RE = re.compile(r"(MUST NOT|MUST|SHOULD|MAY)", re.IGNORECASE)


def clean_line(line: str) -> str:
    cleaned = _LIST_MARKER_RE.sub("", line.strip())
    return cleaned.replace("`", "").replace("**", "")


def parse_line(line: str) -> tuple[str, str] | None:
    """Return (strength, statement) for a normative line, else None."""
    cleaned = clean_line(line)
    match = _MODAL_RE.search(cleaned)
    if not match:
        return None
    strength = "_".join(match.group(1).split()).upper()
    statement = cleaned[match.end():].strip()
    if not normalize_statement(statement):
        return None
    return strength, statement


def extract_heuristic(
    doc_path: str, text: str, default_scope: list[str],
) -> tuple[list[Principle], list[Occurrence]]:
    """Scan every line of `text` for modal keywords, in source order."""
    principles: list[Principle] = []
    occurrences: list[Occurrence] = []
    for index, line in enumerate(text.split("\n"), start=1):
        parsed = parse_line(line)
        if parsed is None:
            continue
        strength, statement = parsed
        span = Span(start_line=index, end_line=index)
        principle = Principle(
            id=new_principle_id(),
            title=infer_title(statement),
            strength=strength,
            statement=statement,
            scope=list(default_scope),
            tags=[],
            sources=[PrincipleSource(doc=doc_path, span=span, raw_text_hash=sha256_text(line))],
            fingerprint=principle_fingerprint(strength, statement),
        )
        principles.append(principle)
        occurrences.append(Occurrence(principle_id=principle.id, doc=doc_path, span=span))
    return principles, occurrences
