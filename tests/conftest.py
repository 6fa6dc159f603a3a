# tests/conftest.py — v3
"""Shared test fixtures for all unit and integration tests.

Provides sample principles, a fixture repository on disk, a repository
context with a mocked git collaborator and a mock LLM client.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from instrctl.config.settings import Settings
from instrctl.core.models import Principle, PrincipleSource, Span
from instrctl.core.text import principle_fingerprint
from instrctl.llm.models import LLMResponse
from instrctl.pipeline.context import RepoContext
from instrctl.vcs.git_client import GitClient

HEAD = "0123456789abcdef0123456789abcdef01234567"

CLAUDE_MD = "# Rules\n\n- MUST run the test suite before pushing\n- MUST NOT commit secrets\n"
FRONTEND_AGENTS_MD = "# Frontend\n\n- SHOULD prefer functional components\n- MAY use tailwind utilities\n"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


# === FIXTURES: Sample data ===


def make_principle(
    pid: str,
    strength: str = "MUST",
    statement: str = "run the tests",
    scope: list[str] | None = None,
    doc: str = "CLAUDE.md",
    line: int = 1,
    title: str | None = None,
) -> Principle:
    """Build a Principle with one source line."""
    return Principle(
        id=pid,
        title=title or statement,
        strength=strength,
        statement=statement,
        scope=scope or ["repo/**"],
        tags=[],
        sources=[
            PrincipleSource(
                doc=doc,
                span=Span(start_line=line, end_line=line),
                raw_text_hash="hash",
            )
        ],
        fingerprint=principle_fingerprint(strength, statement),
    )


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, classifier disabled."""
    return Settings(_env_file=None, llm_classifier_enabled=False)


@pytest.fixture
def fixture_repo(tmp_path: Path) -> Path:
    """Repository tree with a root CLAUDE.md and frontend/agents.md."""
    root = tmp_path / "repo"
    (root / "frontend").mkdir(parents=True)
    (root / "CLAUDE.md").write_text(CLAUDE_MD, encoding="utf-8")
    (root / "frontend" / "agents.md").write_text(FRONTEND_AGENTS_MD, encoding="utf-8")
    return root


@pytest.fixture
def mock_git(fixture_repo: Path) -> MagicMock:
    """GitClient double rooted at the fixture repository."""
    git = MagicMock(spec=GitClient)
    git.toplevel.return_value = fixture_repo
    git.head_commit.return_value = HEAD
    return git


@pytest.fixture
def repo_ctx(mock_git: MagicMock, settings: Settings) -> RepoContext:
    return RepoContext(git=mock_git, settings=settings)


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response."""
    return LLMResponse(
        content='{"principles": []}',
        input_tokens=100,
        output_tokens=50,
        model="claude-3-5-sonnet-latest",
        provider="anthropic",
        latency_ms=500,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient with default response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    return client


# === HELPERS: real git repositories ===


def git(root: Path, *args: str) -> str:
    """Run git in `root` with a fixed identity and return stdout."""
    completed = subprocess.run(
        ["git", "-c", "user.name=instrctl", "-c", "user.email=instrctl@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=root, capture_output=True, text=True, check=True,
    )
    return completed.stdout


def commit_all(root: Path, message: str = "update") -> str:
    """Stage everything, commit and return the new HEAD sha."""
    git(root, "add", "-A")
    git(root, "commit", "-q", "-m", message)
    return git(root, "rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(fixture_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """The fixture repository as a real git work tree with one commit."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(fixture_repo.parent))
    git(fixture_repo, "init", "-q")
    commit_all(fixture_repo, "initial")
    return fixture_repo
