# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
Field names are snake_case in Python; the persisted JSON keeps the
camelCase/snake_case mix of the artifact format through aliases, so
always dump with by_alias=True.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Strength = Literal["MUST", "MUST_NOT", "SHOULD", "MAY"]
Dialect = Literal["generic", "claude", "agents", "cursor", "bugbot", "skills", "custom"]
ConflictType = Literal[
    "DUPLICATE",
    "CONTRADICTION",
    "PARAMETER_MISMATCH",
    "OVERRIDE_MISSING",
    "AMBIGUOUS_SCOPE",
]
Severity = Literal["LOW", "MEDIUM", "HIGH"]

STRENGTHS: tuple[str, ...] = ("MUST", "MUST_NOT", "SHOULD", "MAY")


class ArtifactModel(BaseModel):
    """Base for every persisted model (accepts both alias and field names)."""

    model_config = ConfigDict(populate_by_name=True)


# === DOCUMENTS ===


class DocumentDescriptor(ArtifactModel):
    """One instruction document found in the tree."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str
    dialect: Dialect
    doc_scope: list[str] = Field(alias="docScope")
    sha256: str


class Span(ArtifactModel):
    """1-based inclusive line range."""

    start_line: int = Field(alias="startLine")
    end_line: int = Field(alias="endLine")


# === PRINCIPLES ===


class PrincipleSource(ArtifactModel):
    """Where a principle was read from."""

    doc: str
    span: Span
    raw_text_hash: str = Field(alias="rawTextHash")


class Principle(ArtifactModel):
    """One atomic normative statement."""

    id: str
    title: str
    strength: Strength
    statement: str
    scope: list[str]
    tags: list[str] | None = None
    rationale: str | None = None
    examples: list[str] | None = None
    sources: list[PrincipleSource] | None = None
    fingerprint: str | None = None


class Occurrence(ArtifactModel):
    """Links a principle to one place it was found."""

    principle_id: str = Field(alias="principleId")
    doc: str
    span: Span
    anchor: str | None = None


# === STATE ===


class RepoInfo(ArtifactModel):
    root: str
    head_commit: str


class StateFile(ArtifactModel):
    """Persisted snapshot written by `init`; head_commit pins plan validity."""

    version: int = 1
    repo: RepoInfo
    documents: list[DocumentDescriptor] = Field(default_factory=list)
    principles: list[Principle] = Field(default_factory=list)
    occurrences: list[Occurrence] = Field(default_factory=list)


# === CONFLICTS ===


class ConflictEvidence(ArtifactModel):
    doc: str
    span: Span


class Conflict(ArtifactModel):
    """Detected tension between two or more principles."""

    conflict_id: str = Field(alias="conflictId")
    type: ConflictType
    severity: Severity
    topic: str = ""
    principle_ids: list[str] = Field(alias="principleIds", min_length=2)
    overlapping_scope: list[str] = Field(alias="overlappingScope", default_factory=list)
    evidence: list[ConflictEvidence] = Field(default_factory=list)
    explanation: str
    suggested_resolution: str = Field(alias="suggestedResolution")
    blocking: bool


class ConflictsFile(ArtifactModel):
    version: int = 1
    base_commit: str
    conflicts: list[Conflict] = Field(default_factory=list)

    @property
    def has_blocking(self) -> bool:
        return any(c.blocking for c in self.conflicts)


# === PLAN ===


class PlanChange(ArtifactModel):
    action: Literal["create", "update", "delete"]
    id: str
    before_hash: str | None = None
    after_hash: str | None = None


class FilePatch(ArtifactModel):
    path: str
    patch_unified: str


class PlanConflict(ArtifactModel):
    conflict_id: str
    blocking: bool


class PlanValidation(ArtifactModel):
    patch_constraints_ok: bool = True
    roundtrip_ok: bool = True


class PlanFile(ArtifactModel):
    """Commit-pinned set of file patches awaiting `apply`."""

    version: int = 1
    base_commit: str
    principle_changes: list[PlanChange] = Field(default_factory=list)
    file_patches: list[FilePatch] = Field(default_factory=list)
    conflicts: list[PlanConflict] = Field(default_factory=list)
    validation: PlanValidation = Field(default_factory=PlanValidation)

    @property
    def has_blocking(self) -> bool:
        return any(c.blocking for c in self.conflicts)
