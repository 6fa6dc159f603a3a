# src/pipeline/planner.py — v1
"""Plan builder — compute the patches that sync each document's managed
section with the desired principle set.

Desired set: override principles from .instrctl/instrctl.hcl when that
file defines any, else the principles recorded in state.json. The plan is
pinned to the state's head_commit and only valid while HEAD is unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from instrctl.config.overrides import read_config
from instrctl.conflicts.detector import build_conflicts
from instrctl.core.models import (
    ConflictsFile,
    FilePatch,
    PlanChange,
    PlanConflict,
    PlanFile,
    PlanValidation,
    Principle,
    StateFile,
)
from instrctl.discovery.scanner import read_document
from instrctl.discovery.scope import scope_intersects
from instrctl.pipeline.managed_section import render_managed_section, splice_managed_section
from instrctl.pipeline.patch_guard import patch_within_managed_region
from instrctl.storage import store

if TYPE_CHECKING:
    from instrctl.pipeline.context import RepoContext

logger = logging.getLogger(__name__)


def desired_principles(ctx: RepoContext, state: StateFile) -> tuple[list[Principle], bool]:
    """Principles to render, and whether they come from the override file."""
    config = read_config(ctx.repo_root)
    if config is not None and config.principles:
        return config.principles, True
    return state.principles, False


def diff_principles(current: list[Principle], desired: list[Principle]) -> list[PlanChange]:
    """create / update / delete changes by id; unchanged ids are omitted."""
    before = {p.id: p for p in current}
    after = {p.id: p for p in desired}
    changes: list[PlanChange] = []
    for pid, principle in after.items():
        old = before.get(pid)
        if old is None:
            changes.append(PlanChange(action="create", id=pid, after_hash=principle.fingerprint))
        elif old.fingerprint != principle.fingerprint:
            changes.append(PlanChange(
                action="update", id=pid,
                before_hash=old.fingerprint, after_hash=principle.fingerprint,
            ))
    for pid, principle in before.items():
        if pid not in after:
            changes.append(PlanChange(action="delete", id=pid, before_hash=principle.fingerprint))
    return changes


def summarize_conflicts(conflicts: ConflictsFile | None) -> list[PlanConflict]:
    if conflicts is None:
        return []
    return [
        PlanConflict(conflict_id=c.conflict_id, blocking=c.blocking)
        for c in conflicts.conflicts
    ]


def build_plan(ctx: RepoContext) -> PlanFile:
    """Compute and persist plan.json.

    Raises:
        ArtifactNotFoundError: If state.json does not exist.
        DocumentReadError: If a tracked document cannot be read.
        GitCommandError: If git cannot produce a diff.
    """
    repo_root = ctx.repo_root
    state = store.read_state(repo_root)
    desired, from_overrides = desired_principles(ctx, state)

    if from_overrides:
        conflicts = build_conflicts(state.repo.head_commit, desired)
        logger.info("Using %d override principles", len(desired))
    else:
        conflicts = store.read_conflicts(repo_root)

    patches: list[FilePatch] = []
    constraints_ok = True
    roundtrip_ok = True
    for doc in state.documents:
        content = read_document(repo_root / doc.path)
        selected = [p for p in desired if scope_intersects(p.scope, doc.doc_scope)]
        rendered = render_managed_section(selected)
        updated = splice_managed_section(content, rendered)

        if splice_managed_section(updated, rendered) != updated:
            roundtrip_ok = False
            logger.warning("Managed section of %s does not splice idempotently", doc.path)

        if updated == content:
            continue
        patch = ctx.git.diff_no_index(doc.path, content, updated)
        if not patch.strip():
            continue
        if not patch_within_managed_region(content, patch):
            constraints_ok = False
            logger.warning("Patch for %s touches lines outside the managed section", doc.path)
        patches.append(FilePatch(path=doc.path, patch_unified=patch))

    plan = PlanFile(
        base_commit=state.repo.head_commit,
        principle_changes=diff_principles(state.principles, desired),
        file_patches=patches,
        conflicts=summarize_conflicts(conflicts),
        validation=PlanValidation(
            patch_constraints_ok=constraints_ok,
            roundtrip_ok=roundtrip_ok,
        ),
    )
    store.write_plan(repo_root, plan)
    logger.info(
        "Plan written: %d file patches, %d principle changes, %d conflicts",
        len(plan.file_patches), len(plan.principle_changes), len(plan.conflicts),
    )
    return plan
