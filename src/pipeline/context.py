# src/pipeline/context.py — v1
"""Per-invocation repository context.

Holds the git collaborator and settings for one CLI run. The repository
root and HEAD commit are resolved lazily and cached for the lifetime of
the object, so every component of a run sees the same values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from instrctl.config.settings import Settings
from instrctl.vcs.git_client import GitClient


@dataclass
class RepoContext:
    """Repository root, HEAD and collaborators shared by one command."""

    git: GitClient
    settings: Settings
    _root: Path | None = field(default=None, init=False, repr=False)
    _head: str | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_cwd(cls, cwd: Path | None, settings: Settings) -> RepoContext:
        return cls(git=GitClient(cwd), settings=settings)

    @property
    def repo_root(self) -> Path:
        if self._root is None:
            self._root = self.git.toplevel()
        return self._root

    @property
    def head_commit(self) -> str:
        if self._head is None:
            self._head = self.git.head_commit(self.repo_root)
        return self._head
