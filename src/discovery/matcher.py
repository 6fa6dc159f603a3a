# src/discovery/matcher.py — v1
"""Glob matching and dialect classification for repository paths.

Supported glob grammar:
  **   any sequence of characters, path separators included
  *    any run of characters except '/'
  ?    exactly one character except '/'
A pattern starting with '**/' may match at any directory depth; every
other pattern is anchored at the repository root.
"""

from __future__ import annotations

import re
from functools import lru_cache
from posixpath import basename

from instrctl.core.models import Dialect

_ANY_LEADING_DIR = "^(?:.*/)?"


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into an anchored regular expression."""
    normalized = _normalize(pattern)
    prefix = "^"
    i = 0
    if normalized.startswith("**/"):
        prefix = _ANY_LEADING_DIR
        i = 3

    body: list[str] = []
    while i < len(normalized):
        ch = normalized[i]
        if ch == "*":
            if normalized[i + 1 : i + 2] == "*":
                body.append(".*")
                i += 2
                continue
            body.append("[^/]*")
        elif ch == "?":
            body.append("[^/]")
        else:
            body.append(re.escape(ch))
        i += 1

    return re.compile(f"{prefix}{''.join(body)}$")


def match_any(path: str, patterns: list[str]) -> bool:
    """True when the path matches at least one pattern."""
    normalized = _normalize(path)
    return any(glob_to_regex(p).match(normalized) for p in patterns)


def path_matches(path: str, include: list[str], exclude: list[str]) -> bool:
    """Include/exclude filter; exclude wins and an empty include admits all."""
    relative = _normalize(path)
    if exclude and match_any(relative, exclude):
        return False
    if not include:
        return True
    return match_any(relative, include)


def doc_dialect(path: str) -> Dialect:
    """Classify an instruction document by its name or directory."""
    normalized = _normalize(path).lower()
    name = basename(normalized)
    if name == "claude.md":
        return "claude"
    if name == "agents.md":
        return "agents"
    if name == "bugbot.md":
        return "bugbot"
    if name == "skills.md":
        return "skills"
    if (
        name.startswith("cursor-rules")
        or "/.cursor/" in normalized
        or normalized.startswith(".cursor/")
    ):
        return "cursor"
    return "generic"
