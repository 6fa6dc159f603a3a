# src/pipeline/state_builder.py — v1
"""State builder — discovery → extraction → conflict detection → persist.

Documents are extracted sequentially, in path order. Principle ids from
the previous state.json are carried over when the same statement is
re-extracted from the same document with the same strength, so that
re-running `init` after `apply` leaves rendered markers untouched.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from instrctl.conflicts.detector import build_conflicts
from instrctl.conflicts.report import render_conflicts_markdown
from instrctl.core.models import (
    ConflictsFile,
    Occurrence,
    Principle,
    RepoInfo,
    StateFile,
)
from instrctl.discovery.scanner import discover_documents, read_document
from instrctl.extraction.extractor import extract_principles
from instrctl.storage import store

if TYPE_CHECKING:
    from instrctl.extraction.classifier import PrincipleClassifier
    from instrctl.pipeline.context import RepoContext

logger = logging.getLogger(__name__)

IdentityKey = tuple[str, str, str]


@dataclass(frozen=True)
class StateBuildResult:
    """What `init` produced."""

    state: StateFile
    conflicts: ConflictsFile


def _identity(principle: Principle) -> IdentityKey | None:
    if not principle.sources:
        return None
    return (principle.sources[0].doc, principle.strength, principle.statement)


class IdCarryOver:
    """Reuse ids of previously extracted principles, in source order."""

    def __init__(self, previous: StateFile | None) -> None:
        self._pool: dict[IdentityKey, deque[str]] = defaultdict(deque)
        if previous is not None:
            for principle in previous.principles:
                key = _identity(principle)
                if key is not None:
                    self._pool[key].append(principle.id)

    def apply(
        self, principles: list[Principle], occurrences: list[Occurrence],
    ) -> tuple[list[Principle], list[Occurrence]]:
        renamed: dict[str, str] = {}
        carried: list[Principle] = []
        for principle in principles:
            key = _identity(principle)
            ids = self._pool.get(key) if key is not None else None
            if ids:
                previous_id = ids.popleft()
                renamed[principle.id] = previous_id
                principle = principle.model_copy(update={"id": previous_id})
            carried.append(principle)
        updated = [
            o.model_copy(update={"principle_id": renamed[o.principle_id]})
            if o.principle_id in renamed else o
            for o in occurrences
        ]
        return carried, updated


def load_previous_state(ctx: RepoContext) -> StateFile | None:
    """Previous state.json, None when absent or unreadable."""
    try:
        return store.read_state_if_exists(ctx.repo_root)
    except ValidationError as exc:
        logger.warning("Ignoring unreadable previous state (%d errors)", exc.error_count())
        return None


async def build_state(
    ctx: RepoContext,
    classifier: PrincipleClassifier | None = None,
    previous: StateFile | None = None,
) -> StateFile:
    """Discover documents and extract their principles.

    Args:
        ctx: Repository context (root and HEAD are resolved through it).
        classifier: Optional LLM classifier for extraction.
        previous: Earlier state whose principle ids should be reused.

    Returns:
        StateFile pinned to the current HEAD.
    """
    repo_root = ctx.repo_root
    documents = discover_documents(repo_root)
    carry_over = IdCarryOver(previous)

    principles: list[Principle] = []
    occurrences: list[Occurrence] = []
    for doc in documents:
        content = read_document(repo_root / doc.path)
        result = await extract_principles(doc.path, content, doc.doc_scope, classifier)
        doc_principles, doc_occurrences = carry_over.apply(result.principles, result.occurrences)
        principles.extend(doc_principles)
        occurrences.extend(doc_occurrences)
        logger.info("%s: %d principles (%s)", doc.path, len(doc_principles), result.method)

    return StateFile(
        repo=RepoInfo(root=str(repo_root), head_commit=ctx.head_commit),
        documents=documents,
        principles=principles,
        occurrences=occurrences,
    )


async def write_state_files(
    ctx: RepoContext,
    classifier: PrincipleClassifier | None = None,
) -> StateBuildResult:
    """Build state, detect conflicts, and persist state.json, conflicts.json
    and conflicts.md."""
    previous = load_previous_state(ctx)
    state = await build_state(ctx, classifier=classifier, previous=previous)
    conflicts = build_conflicts(state.repo.head_commit, state.principles)

    store.write_state(ctx.repo_root, state)
    store.write_conflicts(ctx.repo_root, conflicts, render_conflicts_markdown(conflicts))
    logger.info(
        "State written: %d documents, %d principles, %d conflicts",
        len(state.documents), len(state.principles), len(conflicts.conflicts),
    )
    return StateBuildResult(state=state, conflicts=conflicts)
