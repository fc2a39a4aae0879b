"""Tests for FileDiff parsing and serialization.

Tests cover:
- Hunk header parsing (with and without counts)
- Line classification and old/new line numbers
- Paths and status for added, deleted and renamed files
- Binary file detection
- "No newline at end of file" markers
- Multi-file and empty input handling
- Dictionary round trip
"""

from __future__ import annotations

import unittest

from linestage.domain.diff import DiffHunk, DiffLineType, DiffStatus, FileDiff


MODIFIED_DIFF = (
    "diff --git a/src/app.py b/src/app.py\n"
    "index 1111111..2222222 100644\n"
    "--- a/src/app.py\n"
    "+++ b/src/app.py\n"
    "@@ -1,4 +1,5 @@ def main():\n"
    " import os\n"
    "-import sys\n"
    "+import sys, re\n"
    "+import json\n"
    " \n"
    " def main():\n"
    "@@ -20,3 +21,2 @@ class App:\n"
    "     def run(self):\n"
    "-        pass\n"
    "         return 0\n"
)

ADDED_DIFF = """diff --git a/new.txt b/new.txt
new file mode 100644
index 0000000..3333333
--- /dev/null
+++ b/new.txt
@@ -0,0 +1,2 @@
+first
+second
"""

DELETED_DIFF = """diff --git a/old.txt b/old.txt
deleted file mode 100644
index 3333333..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-only
"""

RENAMED_DIFF = """diff --git a/before.txt b/after.txt
similarity index 90%
rename from before.txt
rename to after.txt
index 4444444..5555555 100644
--- a/before.txt
+++ b/after.txt
@@ -1,2 +1,2 @@
 keep
-old
+new
"""

BINARY_DIFF = """diff --git a/logo.png b/logo.png
index 6666666..7777777 100644
Binary files a/logo.png and b/logo.png differ
"""

NO_NEWLINE_DIFF = """diff --git a/notes.txt b/notes.txt
index 8888888..9999999 100644
--- a/notes.txt
+++ b/notes.txt
@@ -1,2 +1,2 @@
 first
-last
\\ No newline at end of file
+last
"""


class TestFileDiffFromDiffContent(unittest.TestCase):
    """Tests for FileDiff.from_diff_content."""

    def test_parses_paths_and_status_of_modified_file(self):
        diff = FileDiff.from_diff_content(MODIFIED_DIFF)

        self.assertEqual(diff.old_path, "src/app.py")
        self.assertEqual(diff.new_path, "src/app.py")
        self.assertEqual(diff.status, DiffStatus.MODIFIED)
        self.assertFalse(diff.binary)
        self.assertEqual(len(diff.hunks), 2)

    def test_parses_hunk_headers(self):
        diff = FileDiff.from_diff_content(MODIFIED_DIFF)
        first, second = diff.hunks

        self.assertEqual(first.header, "@@ -1,4 +1,5 @@ def main():")
        self.assertEqual(
            (first.old_start, first.old_lines, first.new_start, first.new_lines), (1, 4, 1, 5)
        )
        self.assertEqual(
            (second.old_start, second.old_lines, second.new_start, second.new_lines), (20, 3, 21, 2)
        )

    def test_classifies_lines_and_strips_prefixes(self):
        hunk = FileDiff.from_diff_content(MODIFIED_DIFF).hunks[0]

        self.assertEqual(
            [(line.line_type, line.content) for line in hunk.lines],
            [
                (DiffLineType.CONTEXT, "import os"),
                (DiffLineType.DELETION, "import sys"),
                (DiffLineType.ADDITION, "import sys, re"),
                (DiffLineType.ADDITION, "import json"),
                (DiffLineType.CONTEXT, ""),
                (DiffLineType.CONTEXT, "def main():"),
            ],
        )

    def test_assigns_old_and_new_line_numbers(self):
        hunk = FileDiff.from_diff_content(MODIFIED_DIFF).hunks[0]

        self.assertEqual(
            [(line.old_line_no, line.new_line_no) for line in hunk.lines],
            [(1, 1), (2, None), (None, 2), (None, 3), (3, 4), (4, 5)],
        )

    def test_parsed_hunks_satisfy_count_invariant(self):
        for hunk in FileDiff.from_diff_content(MODIFIED_DIFF).hunks:
            context = sum(1 for line in hunk.lines if line.line_type == DiffLineType.CONTEXT)
            self.assertEqual(context + hunk.deletions, hunk.old_lines)
            self.assertEqual(context + hunk.additions, hunk.new_lines)

    def test_counts_additions_and_deletions(self):
        diff = FileDiff.from_diff_content(MODIFIED_DIFF)

        self.assertEqual(diff.additions, 2)
        self.assertEqual(diff.deletions, 2)

    def test_added_file_has_no_old_path(self):
        diff = FileDiff.from_diff_content(ADDED_DIFF)

        self.assertEqual(diff.status, DiffStatus.ADDED)
        self.assertIsNone(diff.old_path)
        self.assertEqual(diff.new_path, "new.txt")
        self.assertEqual(diff.hunks[0].old_lines, 0)

    def test_deleted_file_has_no_new_path_and_default_counts(self):
        diff = FileDiff.from_diff_content(DELETED_DIFF)

        self.assertEqual(diff.status, DiffStatus.DELETED)
        self.assertEqual(diff.old_path, "old.txt")
        self.assertIsNone(diff.new_path)
        hunk = diff.hunks[0]
        self.assertEqual((hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines), (1, 1, 0, 0))

    def test_renamed_file_keeps_both_paths(self):
        diff = FileDiff.from_diff_content(RENAMED_DIFF)

        self.assertEqual(diff.status, DiffStatus.RENAMED)
        self.assertEqual(diff.old_path, "before.txt")
        self.assertEqual(diff.new_path, "after.txt")

    def test_binary_file_has_no_hunks(self):
        diff = FileDiff.from_diff_content(BINARY_DIFF)

        self.assertTrue(diff.binary)
        self.assertEqual(diff.hunks, ())

    def test_no_newline_marker_flags_preceding_line(self):
        hunk = FileDiff.from_diff_content(NO_NEWLINE_DIFF).hunks[0]

        self.assertEqual(
            [(line.line_type, line.no_newline) for line in hunk.lines],
            [
                (DiffLineType.CONTEXT, False),
                (DiffLineType.DELETION, True),
                (DiffLineType.ADDITION, False),
            ],
        )

    def test_no_newline_marker_after_addition(self):
        content = NO_NEWLINE_DIFF.replace("+last\n", "+last\n\\ No newline at end of file\n")

        hunk = FileDiff.from_diff_content(content).hunks[0]

        self.assertEqual([line.no_newline for line in hunk.lines], [False, True, True])
        self.assertEqual((hunk.old_lines, hunk.new_lines), (2, 2))

    def test_preserves_carriage_returns_in_content(self):
        content = MODIFIED_DIFF.replace("+import json\n", "+import json\r\n")

        hunk = FileDiff.from_diff_content(content).hunks[0]

        self.assertEqual(hunk.lines[3].content, "import json\r")

    def test_returns_none_for_empty_content(self):
        self.assertIsNone(FileDiff.from_diff_content(""))

    def test_raises_for_multiple_files(self):
        with self.assertRaises(ValueError) as ctx:
            FileDiff.from_diff_content(MODIFIED_DIFF + ADDED_DIFF)

        self.assertIn("2 files", str(ctx.exception))


class TestDiffHunkFromHunkLines(unittest.TestCase):
    """Tests for DiffHunk.from_hunk_lines."""

    def test_returns_none_without_valid_header(self):
        self.assertIsNone(DiffHunk.from_hunk_lines([]))
        self.assertIsNone(DiffHunk.from_hunk_lines(["not a header", "+x"]))

    def test_missing_counts_default_to_one(self):
        hunk = DiffHunk.from_hunk_lines(["@@ -5 +6 @@", "-a", "+b"])

        self.assertEqual((hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines), (5, 1, 6, 1))


class TestFileDiffSerialization(unittest.TestCase):
    """Tests for FileDiff.to_dict / from_dict."""

    def test_round_trip_preserves_diff(self):
        diff = FileDiff.from_diff_content(RENAMED_DIFF)

        restored = FileDiff.from_dict(diff.to_dict())

        self.assertEqual(restored, diff)

    def test_round_trip_preserves_no_newline_flag(self):
        diff = FileDiff.from_diff_content(NO_NEWLINE_DIFF)

        data = diff.to_dict()

        self.assertTrue(data["hunks"][0]["lines"][1]["no_newline"])
        self.assertEqual(FileDiff.from_dict(data), diff)

    def test_to_dict_includes_counters(self):
        data = FileDiff.from_diff_content(MODIFIED_DIFF).to_dict()

        self.assertEqual(data["additions"], 2)
        self.assertEqual(data["deletions"], 2)
        self.assertEqual(data["status"], "modified")
        self.assertEqual(data["hunks"][0]["lines"][1]["line_type"], "deletion")

    def test_from_dict_builds_missing_header(self):
        hunk = DiffHunk.from_dict({
            "old_start": 3, "old_lines": 1, "new_start": 3, "new_lines": 2, "lines": [],
        })

        self.assertEqual(hunk.header, "@@ -3,1 +3,2 @@")


if __name__ == "__main__":
    unittest.main()
