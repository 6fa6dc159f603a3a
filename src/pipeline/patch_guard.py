# src/pipeline/patch_guard.py — v2
"""Check that a unified diff only touches a document's managed region.

The managed region of the pre-patch document is, in 1-based lines:
  - marker pair present: heading above the begin marker (or the begin
    marker itself) through the end marker (or EOF if it is missing);
  - heading only: heading line through EOF;
  - neither: everything after the last non-blank line (the section is
    appended there). When the file lacks a final newline its last line is
    rewritten too, so it is included.

Removed lines must lie inside the region; added lines must be inserted
inside it or directly after its last line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from instrctl.pipeline.managed_section import find_marker_lines

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass(frozen=True)
class LineRegion:
    start: int
    end: int

    def allows_removal(self, line: int) -> bool:
        return self.start <= line <= self.end

    def allows_insertion(self, before_line: int) -> bool:
        return self.start <= before_line <= self.end + 1


def managed_region(content: str) -> LineRegion:
    """Lines of `content` that splicing the managed section may change."""
    # git numbers hunk lines by "\n" only
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    n = len(lines)
    heading, begin, end = find_marker_lines(lines)

    if begin is not None:
        start = heading if heading is not None else begin
        stop = end if end is not None else n - 1
        return LineRegion(start + 1, stop + 1)

    if heading is not None:
        return LineRegion(heading + 1, max(n, heading + 1))

    last_content = max((i + 1 for i, ln in enumerate(lines) if ln.strip()), default=0)
    start = last_content + 1
    if content and not content.endswith("\n"):
        start = min(start, n)
    return LineRegion(start, max(n, start))


def touched_lines(patch: str) -> tuple[list[int], list[int]]:
    """(removed old-line numbers, insertion points) of a unified diff.

    An insertion point is the old-file line the added text precedes.
    """
    removed: list[int] = []
    inserted: list[int] = []
    old_line = 0
    in_hunk = False
    for raw in patch.split("\n"):
        hunk = _HUNK_RE.match(raw)
        if hunk:
            in_hunk = True
            old_start = int(hunk.group(1))
            old_count = int(hunk.group(2)) if hunk.group(2) is not None else 1
            # "-a,0" means the hunk inserts after line a
            old_line = old_start + 1 if old_count == 0 else old_start
            continue
        if not in_hunk or not raw or raw.startswith("\\"):
            continue
        marker = raw[0]
        if marker == " ":
            old_line += 1
        elif marker == "-":
            removed.append(old_line)
            old_line += 1
        elif marker == "+":
            inserted.append(old_line)
        else:
            in_hunk = False
    return removed, inserted


def patch_within_managed_region(original: str, patch: str) -> bool:
    """True when every hunk line of `patch` stays inside the managed region."""
    region = managed_region(original)
    removed, inserted = touched_lines(patch)
    return all(region.allows_removal(n) for n in removed) and all(
        region.allows_insertion(n) for n in inserted
    )
