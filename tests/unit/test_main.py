# tests/unit/test_main.py — v3
"""Tests for main.py — CLI entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from instrctl.discovery.scanner import DocumentReadError
from instrctl.main import _build_parser, main
from instrctl.pipeline.applier import PlanValidationError
from instrctl.storage.store import ArtifactNotFoundError
from instrctl.vcs.git_client import GitCommandError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory with no LLM configuration in the environment."""
    monkeypatch.chdir(tmp_path)
    for var in ("LLM_CLASSIFIER", "LLM_DEFAULT_PROVIDER", "LLM_DEFAULT_MODEL", "LOG_FILE"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Parser tests
# ---------------------------------------------------------------------------

class TestBuildParser:
    def test_version_flag(self, capsys):
        parser = _build_parser()
        with pytest.raises(SystemExit) as exc_info:
            parser.parse_args(["--version"])
        assert exc_info.value.code == 0
        assert "instrctl" in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["init", "plan", "apply"])
    def test_subcommands(self, command: str):
        args = _build_parser().parse_args([command])
        assert args.command == command
        assert args.directory is None
        assert args.no_llm is False

    def test_global_options(self):
        args = _build_parser().parse_args(["-v", "-C", "/repo", "--no-llm", "plan"])
        assert args.verbose is True
        assert args.directory == Path("/repo")
        assert args.no_llm is True

    def test_unknown_command_exits(self):
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["destroy"])


# ---------------------------------------------------------------------------
# main() exit codes
# ---------------------------------------------------------------------------

class TestMain:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_invalid_configuration_returns_1(self, monkeypatch, capsys):
        monkeypatch.setenv("LLM_CLASSIFIER", "no-colon")
        assert main(["plan"]) == 1
        assert "invalid configuration" in capsys.readouterr().err

    def test_no_llm_disables_classifier(self):
        seen = {}

        async def fake_init(args, ctx):
            seen["enabled"] = ctx.settings.llm_classifier_enabled
            return 0

        with patch("instrctl.main._cmd_init", fake_init):
            assert main(["--no-llm", "init"]) == 0
        assert seen["enabled"] is False

    def test_env_file_read_from_directory(self, tmp_path: Path):
        project = tmp_path / "project"
        project.mkdir()
        (project / ".env").write_text("LLM_DEFAULT_MODEL=claude-from-project\n", encoding="utf-8")
        (tmp_path / ".env").write_text("LLM_DEFAULT_MODEL=claude-from-cwd\n", encoding="utf-8")
        seen = {}

        async def fake_init(args, ctx):
            seen["model"] = ctx.settings.llm_default_model
            return 0

        with patch("instrctl.main._cmd_init", fake_init):
            assert main(["-C", str(project), "init"]) == 0
        assert seen["model"] == "claude-from-project"

    @pytest.mark.parametrize("error,expected", [
        (PlanValidationError("stale", exit_code=3), 3),
        (PlanValidationError("blocking", exit_code=2), 2),
        (PlanValidationError("outside", exit_code=4), 4),
        (ArtifactNotFoundError(Path("plan.json"), "run instrctl plan first"), 1),
        (DocumentReadError(Path("CLAUDE.md"), "invalid UTF-8"), 1),
        (RuntimeError("boom"), 1),
        (KeyboardInterrupt(), 130),
    ])
    def test_error_mapping(self, error: BaseException, expected: int):
        with patch("instrctl.main._cmd_apply", AsyncMock(side_effect=error)):
            assert main(["apply"]) == expected

    def test_git_stderr_surfaced(self, capsys):
        error = GitCommandError(
            command=["git", "apply", "-"], returncode=1, stdout="",
            stderr="error: patch failed: CLAUDE.md:1\n",
        )
        with patch("instrctl.main._cmd_apply", AsyncMock(side_effect=error)):
            assert main(["apply"]) == 1
        assert "patch failed: CLAUDE.md:1" in capsys.readouterr().err

    def test_plan_without_state(self, tmp_path: Path):
        assert main(["-C", str(tmp_path), "--no-llm", "plan"]) == 1
