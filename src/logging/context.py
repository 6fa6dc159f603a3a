# src/logging/context.py — v2
"""Contextual logging support — attach command and document to log records."""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

# Set once per CLI invocation.
_command: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "command", default=None
)
# Set while a single document is being processed.
_document: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    command: str | None = None
    document: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(command=_command.get(), document=_document.get())


def set_command_context(command: str) -> None:
    """Set command-level context (init, plan, apply)."""
    _command.set(command)


@contextmanager
def document_scope(document: str) -> Iterator[None]:
    """Tag every record emitted inside the block with the document path."""
    token = _document.set(document)
    try:
        yield
    finally:
        _document.reset(token)


def clear_context() -> None:
    """Reset all context variables."""
    _command.set(None)
    _document.set(None)
