# src/config/overrides.py — v1
"""Override principles read from .instrctl/instrctl.hcl.

This is a narrow, best-effort block extractor, not an HCL parser. The
accepted grammar is:

    principle "<id>" {
      title     = "Short title"
      strength  = "MUST NOT"
      statement = "commit credentials"
      scope     = ["repo/**"]
      tags      = ['security']
    }

Values are either a quoted string or a bracketed array of quoted strings.
Unknown keys are ignored; a block body ends at the first closing brace.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from instrctl.config.settings import ConfigurationError
from instrctl.core.models import STRENGTHS, Principle
from instrctl.core.text import principle_fingerprint
from instrctl.storage import layout

logger = logging.getLogger(__name__)

_BLOCK_RE = re.compile(r'principle\s+"([^"]+)"\s*\{([\s\S]*?)\}')
_ASSIGN_RE = re.compile(r"^(\w+)\s*=\s*(.+)$")


@dataclass
class InstrctlConfig:
    """Parsed override file."""

    principles: list[Principle] = field(default_factory=list)


def _parse_array(raw: str) -> list[str]:
    try:
        parsed = json.loads(raw.replace("'", '"'))
    except json.JSONDecodeError:
        logger.warning("Ignoring unparsable array value: %s", raw)
        return []
    if not isinstance(parsed, list):
        return []
    return [str(item) for item in parsed]


def parse_block(body: str) -> dict[str, str | list[str]]:
    """Parse `key = value` lines of one block body."""
    values: dict[str, str | list[str]] = {}
    for line in body.splitlines():
        match = _ASSIGN_RE.match(line.strip())
        if not match:
            continue
        key, raw = match.group(1), match.group(2).strip()
        if raw.startswith("["):
            values[key] = _parse_array(raw)
        else:
            values[key] = raw.removeprefix('"').removesuffix('"')
    return values


def _as_list(value: str | list[str] | None) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return value


def _normalize_strength(raw: str | list[str] | None, principle_id: str) -> str:
    if raw is None:
        return "MUST"
    if not isinstance(raw, str):
        raise ConfigurationError(f"principle {principle_id!r}: strength must be a string")
    strength = "_".join(raw.split()).upper()
    if strength not in STRENGTHS:
        raise ConfigurationError(
            f"principle {principle_id!r}: unknown strength {raw!r} "
            f"(expected one of {', '.join(STRENGTHS)})"
        )
    return strength


def parse_config(text: str) -> InstrctlConfig:
    """Extract every `principle` block from override-file text.

    Raises:
        ConfigurationError: On an invalid strength or malformed block.
    """
    principles: list[Principle] = []
    for match in _BLOCK_RE.finditer(text):
        principle_id, body = match.group(1), match.group(2)
        values = parse_block(body)
        strength = _normalize_strength(values.get("strength"), principle_id)
        statement = values.get("statement", "")
        if not isinstance(statement, str):
            raise ConfigurationError(f"principle {principle_id!r}: statement must be a string")
        title = values.get("title", principle_id)
        rationale = values.get("rationale")
        try:
            principles.append(
                Principle(
                    id=principle_id,
                    title=title if isinstance(title, str) else principle_id,
                    strength=strength,
                    statement=statement,
                    scope=_as_list(values.get("scope")) or ["repo/**"],
                    tags=_as_list(values.get("tags")) or [],
                    rationale=rationale if isinstance(rationale, str) else None,
                    examples=_as_list(values.get("examples")) or [],
                    fingerprint=principle_fingerprint(strength, statement),
                )
            )
        except ValidationError as exc:
            raise ConfigurationError(f"principle {principle_id!r}: {exc}") from exc
    return InstrctlConfig(principles=principles)


def read_config(repo_root: Path) -> InstrctlConfig | None:
    """Read the override file; None when the repository has none."""
    path = layout.config_path(repo_root)
    if not path.is_file():
        return None
    config = parse_config(path.read_text(encoding="utf-8"))
    logger.info("Loaded %d override principles from %s", len(config.principles), path)
    return config
