# src/storage/store.py — v1
"""Read and write the JSON artifacts under .instrctl/.

Writes are atomic (temp file in the same directory, then os.replace) so a
crashed run never leaves a truncated artifact behind. There is no
locking: the last writer wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel

from instrctl.core.models import ConflictsFile, PlanFile, StateFile
from instrctl.storage import layout

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ArtifactNotFoundError(Exception):
    """Raised when a prerequisite artifact has not been produced yet."""

    def __init__(self, path: Path, hint: str) -> None:
        self.path = path
        self.hint = hint
        super().__init__(f"{path} not found; {hint}")


def write_text_atomic(path: Path, content: str) -> None:
    """Write text through a sibling temp file and an atomic rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def dump_model(model: BaseModel) -> str:
    """Serialize an artifact model with its wire field names."""
    return model.model_dump_json(by_alias=True, exclude_none=True, indent=2) + "\n"


def _write_model(path: Path, model: BaseModel) -> Path:
    write_text_atomic(path, dump_model(model))
    logger.debug("Wrote %s", path)
    return path


def _read_model(path: Path, model_cls: type[ModelT]) -> ModelT:
    return model_cls.model_validate_json(path.read_text(encoding="utf-8"))


# --- State ---

def write_state(repo_root: Path, state: StateFile) -> Path:
    return _write_model(layout.state_path(repo_root), state)


def read_state(repo_root: Path) -> StateFile:
    """Load state.json.

    Raises:
        ArtifactNotFoundError: If `init` has not been run.
    """
    path = layout.state_path(repo_root)
    if not path.is_file():
        raise ArtifactNotFoundError(path, "run instrctl init first")
    return _read_model(path, StateFile)


def read_state_if_exists(repo_root: Path) -> StateFile | None:
    path = layout.state_path(repo_root)
    if not path.is_file():
        return None
    return _read_model(path, StateFile)


# --- Conflicts ---

def write_conflicts(repo_root: Path, conflicts: ConflictsFile, report_markdown: str) -> Path:
    """Write conflicts.json together with its markdown report."""
    path = _write_model(layout.conflicts_path(repo_root), conflicts)
    write_text_atomic(layout.conflicts_report_path(repo_root), report_markdown)
    return path


def read_conflicts(repo_root: Path) -> ConflictsFile | None:
    """Load conflicts.json, None when absent."""
    path = layout.conflicts_path(repo_root)
    if not path.is_file():
        return None
    return _read_model(path, ConflictsFile)


# --- Plan ---

def write_plan(repo_root: Path, plan: PlanFile) -> Path:
    return _write_model(layout.plan_path(repo_root), plan)


def read_plan(repo_root: Path) -> PlanFile:
    """Load plan.json.

    Raises:
        ArtifactNotFoundError: If `plan` has not been run.
    """
    path = layout.plan_path(repo_root)
    if not path.is_file():
        raise ArtifactNotFoundError(path, "run instrctl plan first")
    return _read_model(path, PlanFile)
