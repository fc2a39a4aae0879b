"""Tests for the stage / unstage / discard command.

Tests cover:
- Routing each action to the right git apply call
- Hunk vs line selections
- --dry-run and --list output
- Config file and command line overrides reaching git diff
- Error exit codes for bad selections, binary files and git failures
"""

import io
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from linestage.commands.stage import cmd_stage
from linestage.domain.config import CONFIG_ENV_VAR, CONFIG_FILENAME, DiffOptions
from linestage.services.git_operations import GitApplyError, GitOperationsService
from linestage.services.staging import StagingAction


DIFF = (
    "diff --git a/a.txt b/a.txt\n"
    "index 1111111..2222222 100644\n"
    "--- a/a.txt\n"
    "+++ b/a.txt\n"
    "@@ -1,3 +1,3 @@\n"
    " a\n"
    "-b\n"
    "+B\n"
    " c\n"
    "@@ -10,2 +10,3 @@\n"
    " j\n"
    "+k\n"
    " l\n"
)


class TestCmdStage(unittest.TestCase):
    """Tests for cmd_stage with GitOperationsService mocked."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.repo = self._tmp.name

        env = {k: v for k, v in os.environ.items() if k != CONFIG_ENV_VAR}
        self.env_patcher = patch.dict(os.environ, env, clear=True)
        self.env_patcher.start()

        self.mock_git = MagicMock(spec=GitOperationsService)
        self.mock_git.get_file_diff.return_value = DIFF
        self.git_patcher = patch(
            "linestage.commands.stage.GitOperationsService",
            return_value=self.mock_git,
        )
        self.mock_git_cls = self.git_patcher.start()

    def tearDown(self):
        self.git_patcher.stop()
        self.env_patcher.stop()
        self._tmp.cleanup()

    def _run(self, action=StagingAction.STAGE, **kwargs) -> tuple[int, str, str]:
        kwargs.setdefault("repo_path", self.repo)
        with patch("sys.stdout", new_callable=io.StringIO) as out, \
                patch("sys.stderr", new_callable=io.StringIO) as err:
            code = cmd_stage(action, "a.txt", **kwargs)
        return code, out.getvalue(), err.getvalue()

    # --------------------------------------------------------
    # Actions
    # --------------------------------------------------------

    def test_stage_lines_applies_patch_to_index(self):
        code, out, _ = self._run(lines=["0:1,0:2", "1:1"])

        self.assertEqual(code, 0)
        self.mock_git_cls.assert_called_once_with(self.repo)
        patch_text = self.mock_git.stage_patch.call_args[0][0]
        self.assertIn("-b\n+B\n", patch_text)
        self.assertIn("+k\n", patch_text)
        self.assertIn("Staged 2 hunk(s) in a.txt", out)

    def test_unstage_reads_staged_diff(self):
        code, out, _ = self._run(StagingAction.UNSTAGE, lines=["0:2"])

        self.assertEqual(code, 0)
        self.assertTrue(self.mock_git.get_file_diff.call_args.kwargs["staged"])
        self.mock_git.unstage_patch.assert_called_once()
        self.assertIn("Unstaged 1 hunk(s) in a.txt", out)

    def test_discard_hunk(self):
        code, out, _ = self._run(StagingAction.DISCARD, hunk_index=1)

        self.assertEqual(code, 0)
        patch_text = self.mock_git.discard_patch.call_args[0][0]
        self.assertIn("@@ -10,2 +10,3 @@\n j\n+k\n l\n", patch_text)
        self.assertIn("Discarded 1 hunk(s) in a.txt", out)

    def test_context_only_selection_applies_nothing(self):
        code, out, _ = self._run(lines=["0:0"])

        self.assertEqual(code, 0)
        self.mock_git.stage_patch.assert_not_called()
        self.assertIn("Nothing to stage in a.txt", out)

    # --------------------------------------------------------
    # Dry run and listing
    # --------------------------------------------------------

    def test_dry_run_prints_patch_without_applying(self):
        code, out, _ = self._run(lines=["1:1"], dry_run=True)

        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("diff --git a/a.txt b/a.txt\n"))
        self.assertIn("+k\n", out)
        self.mock_git.stage_patch.assert_not_called()

    def test_list_prints_line_keys(self):
        code, out, _ = self._run(list_lines=True)

        self.assertEqual(code, 0)
        self.assertIn("Hunk 1: @@ -10,2 +10,3 @@", out)
        self.assertIn("1:1", out)
        self.mock_git.stage_patch.assert_not_called()

    # --------------------------------------------------------
    # Configuration
    # --------------------------------------------------------

    def test_config_file_and_overrides_reach_git_diff(self):
        (Path(self.repo) / CONFIG_FILENAME).write_text(
            "context_lines: 1\n"
            "ignore_whitespace_eol: true\n"
            "unidiff_zero: false\n"
        )

        self._run(lines=["0:1"], context_lines=0, ignore_whitespace=True)

        self.assertEqual(
            self.mock_git.get_file_diff.call_args.kwargs["options"],
            DiffOptions(context_lines=0, ignore_whitespace=True, ignore_whitespace_eol=True),
        )
        self.assertFalse(self.mock_git.stage_patch.call_args.kwargs["unidiff_zero"])

    def test_invalid_config_fails(self):
        (Path(self.repo) / CONFIG_FILENAME).write_text("context_lines: lots\n")

        code, _, err = self._run(lines=["0:1"])

        self.assertEqual(code, 1)
        self.assertIn("context_lines", err)
        self.mock_git.get_file_diff.assert_not_called()

    # --------------------------------------------------------
    # Errors
    # --------------------------------------------------------

    def test_requires_a_selection(self):
        code, _, err = self._run()

        self.assertEqual(code, 1)
        self.assertIn("Nothing selected", err)

    def test_malformed_line_key_fails(self):
        code, _, err = self._run(lines=["0-1"])

        self.assertEqual(code, 1)
        self.assertIn("0-1", err)

    def test_binary_file_fails(self):
        self.mock_git.get_file_diff.return_value = (
            "diff --git a/a.txt b/a.txt\n"
            "Binary files a/a.txt and b/a.txt differ\n"
        )

        code, _, err = self._run(lines=["0:0"])

        self.assertEqual(code, 1)
        self.assertIn("binary", err)

    def test_git_failure_is_reported(self):
        self.mock_git.stage_patch.side_effect = GitApplyError("Failed to apply patch: corrupt patch")

        code, _, err = self._run(lines=["0:1"])

        self.assertEqual(code, 1)
        self.assertIn("Error: Failed to apply patch: corrupt patch", err)


if __name__ == "__main__":
    unittest.main()
