# src/vcs/git_client.py — v2
"""Thin subprocess wrapper around the git executable.

Only four operations are needed: the repository top level, the HEAD
commit, a unified diff between two in-memory texts (git diff --no-index)
and applying a patch (git apply). Every command runs non-interactively
and its stderr is surfaced verbatim on failure. Output is read as bytes
and decoded without newline translation, so CRLF documents diff and
apply unchanged.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

UNKNOWN_COMMIT = "unknown"


class GitCommandError(Exception):
    """Raised when a git subprocess command exits with an unexpected code."""

    def __init__(
        self,
        *,
        command: Sequence[str],
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        message = f"git command failed ({returncode}): {' '.join(command)}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Normalized subprocess result."""

    command: tuple[str, ...]
    cwd: str
    returncode: int
    stdout: str
    stderr: str


class GitClient:
    """Run git commands for one working directory."""

    def __init__(self, cwd: Path | None = None, git_executable: str = "git") -> None:
        self._cwd = Path(cwd) if cwd is not None else Path.cwd()
        self._git = git_executable

    @property
    def cwd(self) -> Path:
        return self._cwd

    def toplevel(self) -> Path:
        """Repository root; the working directory when not inside a repository."""
        try:
            result = self._run_git(["rev-parse", "--show-toplevel"])
        except GitCommandError as exc:
            logger.debug("Not a git work tree (%s); using %s", exc.stderr.strip(), self._cwd)
            return self._cwd.resolve()
        return Path(result.stdout.strip()).resolve()

    def head_commit(self, repo_root: Path | None = None) -> str:
        """HEAD commit sha, or 'unknown' when there is none (e.g. no commits)."""
        try:
            result = self._run_git(["rev-parse", "HEAD"], cwd=repo_root)
        except GitCommandError as exc:
            logger.debug("Cannot resolve HEAD (%s)", exc.stderr.strip())
            return UNKNOWN_COMMIT
        return result.stdout.strip()

    def diff_no_index(self, rel_path: str, before: str, after: str) -> str:
        """Unified diff turning `before` into `after`, with a/ and b/ prefixes.

        Returns an empty string when the texts are identical. The patch
        headers name `rel_path`, so it applies with `git apply` from the
        repository root.
        """
        with tempfile.TemporaryDirectory(prefix="instrctl-diff-") as tmp:
            tmp_root = Path(tmp)
            for side, text in (("a", before), ("b", after)):
                target = tmp_root / side / rel_path
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(text.encode("utf-8"))
            result = self._run_git(
                [
                    "diff", "--no-index", "--no-color", "--no-ext-diff", "--no-prefix",
                    "--", f"a/{rel_path}", f"b/{rel_path}",
                ],
                cwd=tmp_root,
                ok_codes=(0, 1),
            )
        return result.stdout

    def apply_patch(self, patch: str, repo_root: Path | None = None) -> CommandResult:
        """Apply a unified diff to the work tree.

        Raises:
            GitCommandError: With git's stderr when the patch does not apply.
        """
        return self._run_git(
            ["apply", "--whitespace=nowarn", "-"],
            cwd=repo_root,
            input_text=patch,
        )

    def _run_git(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        ok_codes: Sequence[int] = (0,),
        input_text: str | None = None,
    ) -> CommandResult:
        command = (self._git, *args)
        run_cwd = (cwd if cwd is not None else self._cwd).resolve()
        env = os.environ.copy()
        env["GIT_TERMINAL_PROMPT"] = "0"

        try:
            completed = subprocess.run(
                command,
                cwd=run_cwd,
                env=env,
                capture_output=True,
                input=input_text.encode("utf-8") if input_text is not None else None,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitCommandError(
                command=command, returncode=127, stdout="", stderr=str(exc),
            ) from exc

        result = CommandResult(
            command=command,
            cwd=run_cwd.as_posix(),
            returncode=completed.returncode,
            stdout=completed.stdout.decode("utf-8"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
        logger.debug("git %s -> %d", " ".join(args), result.returncode)
        if result.returncode not in ok_codes:
            raise GitCommandError(
                command=command,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result
