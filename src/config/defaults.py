# src/config/defaults.py — v1
"""Declarative defaults: discovery globs and managed-section markers."""

from __future__ import annotations

# Instruction documents discovered by default (one glob per dialect).
DEFAULT_INCLUDE: list[str] = [
    "**/agents.md",
    "**/bugbot.md",
    "**/skills.md",
    "**/CLAUDE.md",
    "**/claude.md",
    "**/.cursor/rules*",
    "**/cursor-rules*",
]

DEFAULT_EXCLUDE: list[str] = [
    ".git/**",
    "node_modules/**",
    "vendor/**",
    "dist/**",
    "build/**",
]

MANAGED_SECTION_HEADING = "## Managed Principles"
MANAGED_BEGIN = "<!-- instrctl:begin managed -->"
MANAGED_END = "<!-- instrctl:end managed -->"


def principle_begin_marker(principle_id: str) -> str:
    return f"<!-- instrctl:begin {principle_id} -->"


def principle_end_marker(principle_id: str) -> str:
    return f"<!-- instrctl:end {principle_id} -->"
