# tests/unit/discovery/test_matcher.py — v1
"""Tests for discovery/matcher.py — glob compilation, filtering, dialects."""

from __future__ import annotations

import pytest

from instrctl.discovery.matcher import doc_dialect, glob_to_regex, match_any, path_matches


class TestGlobToRegex:
    def test_double_star_spans_directories(self):
        rx = glob_to_regex("docs/**/file*.md")
        assert rx.match("docs/a/file1.md")
        assert rx.match("docs/a/b/fileX.md")

    def test_double_star_requires_a_directory(self):
        assert not glob_to_regex("docs/**/file*.md").match("docs/file.md")

    def test_single_star_stops_at_separator(self):
        rx = glob_to_regex("*.md")
        assert rx.match("agents.md")
        assert not rx.match("docs/agents.md")

    def test_question_mark_is_one_character(self):
        rx = glob_to_regex("v?.md")
        assert rx.match("v1.md")
        assert not rx.match("v10.md")
        assert not rx.match("v/.md")

    def test_leading_double_star_matches_any_depth(self):
        rx = glob_to_regex("**/agents.md")
        assert rx.match("agents.md")
        assert rx.match("a/b/agents.md")
        assert not rx.match("a/b/xagents.md")

    def test_other_patterns_anchored_at_root(self):
        rx = glob_to_regex("dist/**")
        assert rx.match("dist/agents.md")
        assert not rx.match("pkg/dist/agents.md")

    def test_regex_metacharacters_are_literal(self):
        rx = glob_to_regex("a+b(c).md")
        assert rx.match("a+b(c).md")
        assert not rx.match("aab(c).md")

    def test_backslashes_normalized(self):
        assert glob_to_regex("docs\\*.md").match("docs/x.md")


class TestPathMatches:
    INCLUDE = ["**/*.md"]
    EXCLUDE = ["node_modules/**", "dist/**"]

    def test_accepts_included(self):
        assert path_matches("notes/agents.md", self.INCLUDE, self.EXCLUDE)

    @pytest.mark.parametrize("path", ["node_modules/agents.md", "dist/agents.md"])
    def test_exclude_wins(self, path):
        assert not path_matches(path, self.INCLUDE, self.EXCLUDE)

    def test_empty_include_means_everything(self):
        assert path_matches("anything.txt", [], self.EXCLUDE)

    def test_match_any_normalizes_separators(self):
        assert match_any("notes\\agents.md", self.INCLUDE)


class TestDocDialect:
    @pytest.mark.parametrize(
        ("path", "dialect"),
        [
            ("CLAUDE.md", "claude"),
            ("sub/claude.md", "claude"),
            ("agents.md", "agents"),
            ("BUGBOT.md", "bugbot"),
            ("skills.md", "skills"),
            ("cursor-rules.txt", "cursor"),
            (".cursor/rules.yaml", "cursor"),
            ("pkg/.cursor/rules", "cursor"),
            ("README.md", "generic"),
        ],
    )
    def test_mapping(self, path, dialect):
        assert doc_dialect(path) == dialect
