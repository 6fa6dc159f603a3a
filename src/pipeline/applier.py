# src/pipeline/applier.py — v1
"""Apply engine — validate plan.json, apply its patches, refresh state.

Phases, reported through the optional on_phase callback:
  validate  plan pinned to the current commit, no blocking conflicts
  patch     one call per file, in plan order (git apply)
  state     state.json / conflicts.json rebuilt from the patched tree

A failing patch aborts the remaining ones. Patches already applied are
left in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from instrctl.core.models import FilePatch, PlanFile, StateFile
from instrctl.discovery.scanner import read_document
from instrctl.logging.context import document_scope
from instrctl.pipeline.patch_guard import patch_within_managed_region
from instrctl.pipeline.state_builder import write_state_files
from instrctl.storage import store

if TYPE_CHECKING:
    from instrctl.extraction.classifier import PrincipleClassifier
    from instrctl.pipeline.context import RepoContext

logger = logging.getLogger(__name__)

ApplyPhase = Literal["validate", "patch", "state"]
PhaseCallback = Callable[[ApplyPhase, str | None], None]

EXIT_BLOCKING = 2
EXIT_STALE = 3
EXIT_PATCH_CONSTRAINT = 4


class PlanValidationError(Exception):
    """Plan cannot be applied; exit_code is the CLI status to return."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.exit_code = exit_code
        super().__init__(message)


def validate_plan(ctx: RepoContext, state: StateFile, plan: PlanFile) -> None:
    """Reject stale plans and plans carrying blocking conflicts.

    Raises:
        PlanValidationError: exit code 3 when stale, 2 when blocking.
    """
    head = ctx.head_commit
    if plan.base_commit != state.repo.head_commit or plan.base_commit != head:
        raise PlanValidationError(
            f"Plan base commit {plan.base_commit} does not match HEAD {head}; "
            "re-run instrctl init and instrctl plan.",
            EXIT_STALE,
        )
    if plan.has_blocking:
        blocking = ", ".join(c.conflict_id for c in plan.conflicts if c.blocking)
        raise PlanValidationError(
            f"Blocking conflicts detected in plan ({blocking}); resolve before applying.",
            EXIT_BLOCKING,
        )


def validate_patch(ctx: RepoContext, state: StateFile, patch: FilePatch) -> None:
    """Reject patches for untracked files or outside the managed region.

    Raises:
        PlanValidationError: exit code 4.
    """
    if patch.path not in {doc.path for doc in state.documents}:
        raise PlanValidationError(
            f"Patch targets a file that is not a tracked document: {patch.path}",
            EXIT_PATCH_CONSTRAINT,
        )
    current = read_document(ctx.repo_root / patch.path)
    if not patch_within_managed_region(current, patch.patch_unified):
        raise PlanValidationError(
            f"Patch modifies lines outside the managed section in {patch.path}",
            EXIT_PATCH_CONSTRAINT,
        )


async def apply_plan(
    ctx: RepoContext,
    on_phase: PhaseCallback | None = None,
    classifier: PrincipleClassifier | None = None,
) -> PlanFile:
    """Apply plan.json to the work tree and rebuild state.

    Raises:
        ArtifactNotFoundError: If state.json or plan.json is missing.
        PlanValidationError: If the plan is stale, blocked or out of bounds.
        GitCommandError: If `git apply` rejects a patch (stderr preserved).
    """

    def report(phase: ApplyPhase, detail: str | None = None) -> None:
        if on_phase is not None:
            on_phase(phase, detail)

    repo_root = ctx.repo_root
    state = store.read_state(repo_root)
    plan = store.read_plan(repo_root)

    report("validate")
    validate_plan(ctx, state, plan)

    for patch in plan.file_patches:
        report("patch", patch.path)
        with document_scope(patch.path):
            validate_patch(ctx, state, patch)
            ctx.git.apply_patch(patch.patch_unified, repo_root)
            logger.info("Applied patch to %s", patch.path)

    report("state")
    await write_state_files(ctx, classifier=classifier)
    return plan
