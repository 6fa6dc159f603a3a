# src/conflicts/report.py — v1
"""Markdown rendering of a ConflictsFile (written as conflicts.md)."""

from __future__ import annotations

from instrctl.core.models import ConflictsFile

NO_CONFLICTS_LINE = "No conflicts detected."

_COLUMNS = ("ID", "Type", "Severity", "Blocking", "Principle IDs", "Explanation")


def _cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def render_conflicts_markdown(conflicts: ConflictsFile) -> str:
    lines = [
        "# instrctl conflicts",
        "",
        f"Base commit: `{conflicts.base_commit}`",
        "",
    ]
    if not conflicts.conflicts:
        lines.append(NO_CONFLICTS_LINE)
        return "\n".join(lines) + "\n"

    lines.append("| " + " | ".join(_COLUMNS) + " |")
    lines.append("|" + "|".join("---" for _ in _COLUMNS) + "|")
    for c in conflicts.conflicts:
        row = (
            c.conflict_id,
            c.type,
            c.severity,
            "yes" if c.blocking else "no",
            ", ".join(c.principle_ids),
            _cell(c.explanation),
        )
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines) + "\n"
