# src/vcs/__init__.py — v1
"""Version-control collaborator (git subprocess)."""
