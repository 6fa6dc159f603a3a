# src/config/__init__.py — v1
"""Settings, defaults and the override-file reader."""
