# src/storage/__init__.py — v1
"""Artifact layout and persistence under .instrctl/."""
