# tests/unit/discovery/test_scope.py — v1
"""Tests for discovery/scope.py — scope inference and intersection."""

from __future__ import annotations

from pathlib import Path

from instrctl.discovery.scope import frontmatter_scope, infer_doc_scope, scope_intersects


class TestInferDocScope:
    def test_root_document(self, tmp_path: Path):
        assert infer_doc_scope(tmp_path, tmp_path / "CLAUDE.md", "# Rules\n") == ["repo/**"]

    def test_nested_document(self, tmp_path: Path):
        doc = tmp_path / "frontend" / "agents.md"
        assert infer_doc_scope(tmp_path, doc, "# Frontend\n") == ["frontend/**"]

    def test_relative_path_accepted(self, tmp_path: Path):
        assert infer_doc_scope(tmp_path, "a/b/agents.md", "") == ["a/b/**"]

    def test_frontmatter_overrides(self, tmp_path: Path):
        text = "---\nscope: ['frontend/**','docs/**']\n---\n# Rules\n"
        assert infer_doc_scope(tmp_path, tmp_path / "CLAUDE.md", text) == ["frontend/**", "docs/**"]
        nested = tmp_path / "backend" / "agents.md"
        assert infer_doc_scope(tmp_path, nested, text) == ["frontend/**", "docs/**"]

    def test_frontmatter_without_scope_falls_back(self, tmp_path: Path):
        text = "---\ntitle: x\n---\n"
        assert infer_doc_scope(tmp_path, tmp_path / "sub" / "agents.md", text) == ["sub/**"]

    def test_empty_scope_list_falls_back(self):
        assert frontmatter_scope("---\nscope: []\n---\n") == []

    def test_frontmatter_must_lead(self):
        assert frontmatter_scope("# Title\n---\nscope: [a/**]\n---\n") == []

    def test_crlf_frontmatter(self):
        assert frontmatter_scope('---\r\nscope: ["x/**"]\r\n---\r\n') == ["x/**"]


class TestScopeIntersects:
    def test_repo_scope_intersects_everything(self):
        assert scope_intersects(["repo/**"], ["docs/**"])
        assert scope_intersects(["docs/**"], ["repo/**"])

    def test_nested_directories(self):
        assert scope_intersects(["frontend/**"], ["frontend/ui/**"])

    def test_disjoint_directories(self):
        assert not scope_intersects(["frontend/**"], ["backend/**"])

    def test_shared_string_prefix_counts_as_overlap(self):
        assert scope_intersects(["front/**"], ["frontend/**"])

    def test_any_pair_suffices(self):
        assert scope_intersects(["a/**", "b/**"], ["c/**", "b/**"])

    def test_empty_lists(self):
        assert not scope_intersects([], ["repo/**"])
