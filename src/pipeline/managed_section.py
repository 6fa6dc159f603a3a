# src/pipeline/managed_section.py — v1
"""Render, splice and mask the managed principles section of a document.

Rendered layout (sorted by title, one block per principle):

    ## Managed Principles
    <!-- instrctl:begin managed -->
    <!-- instrctl:begin P-1A2B3C4D -->
    - **MUST NOT** commit secrets
    <!-- instrctl:end P-1A2B3C4D -->

    <!-- instrctl:begin P-... -->
    ...
    <!-- instrctl:end managed -->

Splicing a freshly rendered section into its own output is a no-op, which
is what makes `plan` idempotent after `apply`.
"""

from __future__ import annotations

import re

from instrctl.config.defaults import (
    MANAGED_BEGIN,
    MANAGED_END,
    MANAGED_SECTION_HEADING,
    principle_begin_marker,
    principle_end_marker,
)
from instrctl.core.models import Principle

_HEADING_LINE_RE = re.compile(
    rf"^{re.escape(MANAGED_SECTION_HEADING)}[ \t]*(?:\r?\n|\Z)", re.MULTILINE,
)


def render_principle(principle: Principle) -> str:
    strength = principle.strength.replace("_", " ")
    return "\n".join([
        principle_begin_marker(principle.id),
        f"- **{strength}** {principle.statement}",
        principle_end_marker(principle.id),
    ])


def render_managed_section(principles: list[Principle]) -> str:
    """Render the full section, newline-terminated."""
    ordered = sorted(principles, key=lambda p: (p.title.casefold(), p.title))
    blocks = "\n\n".join(render_principle(p) for p in ordered)
    return "\n".join([MANAGED_SECTION_HEADING, MANAGED_BEGIN, blocks, MANAGED_END]) + "\n"


def splice_managed_section(original: str, rendered: str) -> str:
    """Put `rendered` in place of the document's managed section.

    Marker pair present: the span from the begin marker (plus a heading line
    directly above it) through the end marker (plus its newline) is replaced.
    Heading only: the heading line is replaced. Otherwise the section is
    appended after the existing content, separated by one blank line.
    """
    begin = original.find(MANAGED_BEGIN)
    end = original.find(MANAGED_END, begin) if begin != -1 else -1
    if begin != -1 and end != -1:
        start = begin
        heading_line = MANAGED_SECTION_HEADING + "\n"
        prefix = original[:begin]
        if prefix.endswith(heading_line):
            heading_start = begin - len(heading_line)
            if heading_start == 0 or original[heading_start - 1] == "\n":
                start = heading_start
        stop = end + len(MANAGED_END)
        if original.startswith("\n", stop):
            stop += 1
        return original[:start] + rendered + original[stop:]

    heading = _HEADING_LINE_RE.search(original)
    if heading:
        return original[: heading.start()] + rendered + original[heading.end():]

    if not original.strip():
        return rendered
    return original.rstrip("\n") + "\n\n" + rendered


def find_marker_lines(lines: list[str]) -> tuple[int | None, int | None, int | None]:
    """0-based indexes of (heading, begin marker, end marker) lines.

    The heading index refers to the heading directly above the begin marker
    when markers exist, else to the first standalone heading line.
    """
    begin = next((i for i, ln in enumerate(lines) if ln.strip() == MANAGED_BEGIN), None)
    end = None
    if begin is not None:
        end = next(
            (i for i in range(begin + 1, len(lines)) if lines[i].strip() == MANAGED_END),
            None,
        )
        heading = begin - 1 if begin > 0 and lines[begin - 1].strip() == MANAGED_SECTION_HEADING else None
        return heading, begin, end
    heading = next(
        (i for i, ln in enumerate(lines) if ln.strip() == MANAGED_SECTION_HEADING), None,
    )
    return heading, None, None


def mask_managed_section(text: str) -> str:
    """Blank out the managed section line-for-line.

    Line numbers of everything outside the section are unchanged, so spans
    extracted from the masked text still point into the real document.
    """
    lines = text.split("\n")
    heading, begin, end = find_marker_lines(lines)
    if begin is None or end is None:
        return text
    start = heading if heading is not None else begin
    for i in range(start, end + 1):
        lines[i] = ""
    return "\n".join(lines)
