# src/extraction/__init__.py — v1
"""Principle extraction: LLM classifier with heuristic fallback."""
