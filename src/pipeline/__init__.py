# src/pipeline/__init__.py — v1
"""init / plan / apply orchestration."""
