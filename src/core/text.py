# src/core/text.py — v2
"""Text hashing and normalization shared by extraction and conflict detection.

normalize_statement() is the key used for duplicate and contradiction
detection: case and punctuation differences must collapse to one key.
"""

from __future__ import annotations

import hashlib
import re
import secrets

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def sha256_text(text: str) -> str:
    """SHA-256 hex digest of UTF-8 encoded text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def normalize_statement(statement: str) -> str:
    """Lowercase, turn non-alphanumeric characters into spaces, collapse whitespace."""
    spaced = _NON_ALNUM_RE.sub(" ", statement.lower())
    return _WHITESPACE_RE.sub(" ", spaced).strip()


def principle_fingerprint(strength: str, statement: str) -> str:
    """Fingerprint = sha256 of strength + normalized statement."""
    return sha256_text(f"{strength}-{normalize_statement(statement)}")


def infer_title(statement: str) -> str:
    """First six words of the statement, or 'Principle' when empty."""
    words = statement.split()[:6]
    return " ".join(words) if words else "Principle"


def new_principle_id() -> str:
    """Random opaque principle id, e.g. P-1A2B3C4D."""
    return f"P-{secrets.token_hex(4).upper()}"
