# src/storage/layout.py — v2
"""Artifact directory structure definition.

Every artifact lives under {repo_root}/.instrctl/:

    .instrctl/
      state.json       # StateFile written by `init` (and after `apply`)
      conflicts.json   # ConflictsFile
      conflicts.md     # human-readable conflicts table
      plan.json        # PlanFile written by `plan`
      instrctl.hcl     # optional override principles (user-authored)
"""

from __future__ import annotations

from pathlib import Path

STATE_DIR = ".instrctl"

STATE_FILE = "state.json"
CONFLICTS_FILE = "conflicts.json"
CONFLICTS_REPORT_FILE = "conflicts.md"
PLAN_FILE = "plan.json"
CONFIG_FILE = "instrctl.hcl"


def state_dir(repo_root: Path) -> Path:
    """Return the hidden artifact directory of a repository."""
    return Path(repo_root) / STATE_DIR


def state_path(repo_root: Path) -> Path:
    return state_dir(repo_root) / STATE_FILE


def conflicts_path(repo_root: Path) -> Path:
    return state_dir(repo_root) / CONFLICTS_FILE


def conflicts_report_path(repo_root: Path) -> Path:
    return state_dir(repo_root) / CONFLICTS_REPORT_FILE


def plan_path(repo_root: Path) -> Path:
    return state_dir(repo_root) / PLAN_FILE


def config_path(repo_root: Path) -> Path:
    return state_dir(repo_root) / CONFIG_FILE
