# src/discovery/scanner.py — v2
"""Document scanner — walk the repository and describe instruction documents.

Walks the tree with os.walk, pruning excluded directories early, and
returns one DocumentDescriptor per matched file, sorted by path so that
repeated runs over the same tree produce identical state.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from instrctl.config.defaults import DEFAULT_EXCLUDE, DEFAULT_INCLUDE
from instrctl.core.models import DocumentDescriptor
from instrctl.core.text import sha256_text
from instrctl.discovery.matcher import doc_dialect, match_any, path_matches
from instrctl.discovery.scope import infer_doc_scope

logger = logging.getLogger(__name__)

_GLOB_CHARS_RE = re.compile(r"[*?\[]")


class DocumentReadError(Exception):
    """Raised when a matched document exists but cannot be read as UTF-8."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


def excluded_segments(exclude: list[str]) -> set[str]:
    """Literal directory names excluded at any depth.

    A pattern of the form `<name>/**` with no glob characters in `<name>`
    prunes every directory called `<name>`, e.g. a nested node_modules.
    """
    names: set[str] = set()
    for pattern in exclude:
        head, sep, tail = pattern.replace("\\", "/").partition("/")
        if sep and tail == "**" and head and not _GLOB_CHARS_RE.search(head):
            names.add(head)
    return names


def read_document(path: Path) -> str:
    """Read a document as UTF-8.

    Raises:
        DocumentReadError: On any OS or decoding failure.
    """
    try:
        return path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentReadError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise DocumentReadError(path, exc.strerror or str(exc)) from exc


def discover_documents(
    repo_root: Path,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
) -> list[DocumentDescriptor]:
    """Find every instruction document under repo_root.

    Args:
        repo_root: Repository top-level directory.
        include: Globs a document must match (defaults to DEFAULT_INCLUDE).
        exclude: Globs that remove files and prune directories
            (defaults to DEFAULT_EXCLUDE).

    Returns:
        Descriptors sorted by repository-relative path.

    Raises:
        DocumentReadError: If a matched file cannot be read.
    """
    repo_root = Path(repo_root)
    include = DEFAULT_INCLUDE if include is None else include
    exclude = DEFAULT_EXCLUDE if exclude is None else exclude
    pruned_names = excluded_segments(exclude)

    documents: list[DocumentDescriptor] = []
    for dirpath, dirnames, filenames in os.walk(repo_root):
        current = Path(dirpath)
        kept: list[str] = []
        for name in sorted(dirnames):
            rel = (current / name).relative_to(repo_root).as_posix()
            if name in pruned_names or match_any(rel + "/", exclude):
                logger.debug("Pruned directory %s", rel)
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            full = current / name
            rel = full.relative_to(repo_root).as_posix()
            if not path_matches(rel, include, exclude):
                continue
            if not full.is_file():
                continue
            text = read_document(full)
            documents.append(
                DocumentDescriptor(
                    path=rel,
                    dialect=doc_dialect(rel),
                    doc_scope=infer_doc_scope(repo_root, rel, text),
                    sha256=sha256_text(text),
                )
            )

    documents.sort(key=lambda d: d.path)
    logger.info("Discovered %d instruction documents under %s", len(documents), repo_root)
    return documents
