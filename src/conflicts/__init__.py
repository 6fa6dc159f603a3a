# src/conflicts/__init__.py — v1
"""Duplicate and contradiction detection."""
