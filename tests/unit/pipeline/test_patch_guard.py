# tests/unit/pipeline/test_patch_guard.py — v2
"""Tests for pipeline/patch_guard.py — managed-region bounds on diffs."""

from __future__ import annotations

import difflib

import pytest

from instrctl.pipeline.managed_section import render_managed_section, splice_managed_section
from instrctl.pipeline.patch_guard import (
    managed_region,
    patch_within_managed_region,
    touched_lines,
)
from instrctl.vcs.git_client import GitClient
from tests.conftest import make_principle, requires_git


def _udiff(before: str, after: str) -> str:
    lines = difflib.unified_diff(
        before.splitlines(keepends=True), after.splitlines(keepends=True),
        fromfile="a/doc.md", tofile="b/doc.md",
    )
    return "".join(line if line.endswith("\n") else line + "\n" for line in lines)


SECTION = render_managed_section([make_principle("P-1", "MUST", "run tests")])


class TestManagedRegion:
    def test_markers(self):
        text = "# Rules\n\n" + SECTION + "tail\n"
        region = managed_region(text)
        assert (region.start, region.end) == (3, 3 + SECTION.count("\n") - 1)

    def test_heading_only(self):
        region = managed_region("a\n## Managed Principles\nb\n")
        assert (region.start, region.end) == (2, 3)

    def test_append_after_last_content(self):
        region = managed_region("a\nb\n\n")
        assert region.start == 3

    def test_missing_final_newline_includes_last_line(self):
        region = managed_region("a\nb")
        assert region.start == 2

    @pytest.mark.parametrize("separator", ["\x0c", "\x0b", "\x1c", "\x85", "\u2028"])
    def test_only_newline_ends_a_line(self, separator):
        region = managed_region(f"# Rules{separator} extra\n- MUST run tests\n")
        assert region.start == 3

    def test_crlf_lines(self):
        region = managed_region("# Rules\r\n\r\n- MUST run tests\r\n\r\n")
        assert region.start == 4


class TestTouchedLines:
    def test_pure_insertion_hunk(self):
        patch = "@@ -2,0 +3,2 @@\n+x\n+y\n"
        assert touched_lines(patch) == ([], [3, 3])

    def test_mixed_hunk(self):
        patch = "--- a/f\n+++ b/f\n@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n"
        assert touched_lines(patch) == ([2], [3])


class TestPatchWithinManagedRegion:
    def test_generated_patches_pass(self):
        new_section = render_managed_section([
            make_principle("P-1", "MUST", "run tests"),
            make_principle("P-2", "MAY", "use tailwind"),
        ])
        for original in ("# Rules\n- MUST x\n", "# Rules", "# Rules\n\n" + SECTION + "tail\n"):
            updated = splice_managed_section(original, new_section)
            assert patch_within_managed_region(original, _udiff(original, updated))

    def test_edit_outside_region_rejected(self):
        original = "# Rules\n- MUST x\n\n" + SECTION
        tampered = original.replace("- MUST x", "- MUST y")
        assert not patch_within_managed_region(original, _udiff(original, tampered))

    @requires_git
    def test_git_patch_with_form_feed_passes(self, tmp_path):
        original = "# Rules\x0c extra\n- MUST run tests\n"
        updated = splice_managed_section(original, SECTION)
        patch = GitClient(tmp_path).diff_no_index("CLAUDE.md", original, updated)
        assert patch
        assert patch_within_managed_region(original, patch)

    @requires_git
    def test_git_patch_with_crlf_passes(self, tmp_path):
        original = "# Rules\r\n\r\n- MUST run tests\r\n"
        updated = splice_managed_section(original, SECTION)
        patch = GitClient(tmp_path).diff_no_index("CLAUDE.md", original, updated)
        assert "\r\n" in patch
        assert patch_within_managed_region(original, patch)

    def test_edit_before_appended_section_rejected(self):
        original = "# Rules\nbody\n"
        assert not patch_within_managed_region(original, _udiff(original, "# Rules!\nbody\n"))
