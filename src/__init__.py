# src/__init__.py — v1
"""instrctl — keep repository instruction documents in sync."""

from instrctl.version import __version__

__all__ = ["__version__"]
