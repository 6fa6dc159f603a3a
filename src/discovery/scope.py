# src/discovery/scope.py — v1
"""Document scope inference and scope intersection.

Scopes are glob strings naming the paths a principle applies to. The
special scope "repo/**" covers the whole repository.
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePosixPath

REPO_SCOPE = "repo/**"

_FRONTMATTER_RE = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---")
_SCOPE_RE = re.compile(r"scope:\s*\[([^\]]*)\]")
_STRIP_RE = re.compile(r"['\"\s]")


def frontmatter_scope(text: str) -> list[str]:
    """Scope list declared as `scope: [...]` in leading frontmatter, if any."""
    frontmatter = _FRONTMATTER_RE.match(text)
    if not frontmatter:
        return []
    scope = _SCOPE_RE.search(frontmatter.group(1))
    if not scope:
        return []
    parts = (_STRIP_RE.sub("", part) for part in scope.group(1).split(","))
    return [part for part in parts if part]


def infer_doc_scope(repo_root: Path | str, doc_path: Path | str, text: str) -> list[str]:
    """Scope of a document: frontmatter override, else its directory."""
    declared = frontmatter_scope(text)
    if declared:
        return declared

    doc = Path(doc_path)
    if doc.is_absolute():
        doc = Path(os.path.relpath(doc, repo_root))
    parent = PurePosixPath(doc.as_posix()).parent
    if str(parent) == ".":
        return [REPO_SCOPE]
    return [f"{parent}/**"]


def scope_intersects(a: list[str], b: list[str]) -> bool:
    """Approximate overlap test by directory prefix.

    "repo/**" intersects everything. Otherwise the trailing "/**" is
    dropped and two scopes intersect when one string is a prefix of the
    other, so "front/**" and "frontend/**" are treated as overlapping.
    """
    for pa in a:
        for pb in b:
            if pa == REPO_SCOPE or pb == REPO_SCOPE:
                return True
            simple_a = pa.removesuffix("/**")
            simple_b = pb.removesuffix("/**")
            if simple_a == simple_b:
                return True
            if simple_a and simple_b and (
                simple_a.startswith(simple_b) or simple_b.startswith(simple_a)
            ):
                return True
    return False
