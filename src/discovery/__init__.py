# src/discovery/__init__.py — v1
"""Document discovery: glob matching, scopes, tree walking."""
