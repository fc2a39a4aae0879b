"""Stage / unstage / discard command.

Thin command that wires config, the git adapter and LineStagingService
together for one file, then reports what was applied.
"""

from __future__ import annotations

import sys

from linestage.domain.config import StagingConfig
from linestage.domain.selection import LineSelection
from linestage.infrastructure.diff_io import format_file_diff_as_text
from linestage.services.git_operations import GitError, GitOperationsService
from linestage.services.staging import BinaryFileError, LineStagingService, StagingAction


PAST_TENSE = {
    StagingAction.STAGE: "Staged",
    StagingAction.UNSTAGE: "Unstaged",
    StagingAction.DISCARD: "Discarded",
}


def cmd_stage(
    action: StagingAction,
    file_path: str,
    lines: list[str] | None = None,
    hunk_index: int | None = None,
    repo_path: str = ".",
    config_path: str | None = None,
    context_lines: int | None = None,
    ignore_whitespace: bool | None = None,
    dry_run: bool = False,
    list_lines: bool = False,
) -> int:
    """Apply an action to selected lines (or one hunk) of a file.

    Args:
        action: Stage, unstage or discard
        file_path: File path relative to the repository root
        lines: "hunk:line" tokens selecting lines (comma-separated allowed)
        hunk_index: Select a whole hunk instead of individual lines
        repo_path: Path to the git repository (default: current directory)
        config_path: Explicit config file (default: $LINESTAGE_CONFIG or
            .linestage.yml in repo_path)
        context_lines: Override config context_lines
        ignore_whitespace: Override config ignore_whitespace
        dry_run: Print the patch instead of applying it
        list_lines: Print the diff the action works on, with line keys, and exit

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    # --------------------------------------------------------
    # 1. Load configuration and dependencies
    # --------------------------------------------------------
    try:
        config = StagingConfig.load(repo_path, config_path).with_overrides(
            context_lines=context_lines,
            ignore_whitespace=ignore_whitespace,
        )
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    service = LineStagingService(GitOperationsService(repo_path), config)

    try:
        if list_lines:
            diff = service.load_file_diff(file_path, staged=action.uses_staged_diff)
            print(format_file_diff_as_text(diff))
            return 0

        # --------------------------------------------------------
        # 2. Parse selection
        # --------------------------------------------------------
        if hunk_index is None and not lines:
            print("Nothing selected: pass --lines or --hunk", file=sys.stderr)
            return 1
        selection = LineSelection.from_strings(lines or [])

        # --------------------------------------------------------
        # 3. Build (and apply) patch
        # --------------------------------------------------------
        if dry_run:
            patch = service.build_patch(
                action, file_path, selection=selection, hunk_index=hunk_index
            )
            if patch:
                sys.stdout.write(patch)
            else:
                print("Selection produces no changes")
            return 0

        result = _run_action(service, action, file_path, selection, hunk_index)

    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    except BinaryFileError as e:
        print(str(e), file=sys.stderr)
        return 1
    except GitError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.applied:
        print(f"Nothing to {action.value} in {file_path}")
        return 0

    hunk_count = result.patch.count("\n@@ ")
    print(f"{PAST_TENSE[action]} {hunk_count} hunk(s) in {file_path}")
    return 0


def _run_action(
    service: LineStagingService,
    action: StagingAction,
    file_path: str,
    selection: LineSelection,
    hunk_index: int | None,
):
    if hunk_index is not None:
        handlers = {
            StagingAction.STAGE: service.stage_hunk,
            StagingAction.UNSTAGE: service.unstage_hunk,
            StagingAction.DISCARD: service.discard_hunk,
        }
        return handlers[action](file_path, hunk_index)

    handlers = {
        StagingAction.STAGE: service.stage_lines,
        StagingAction.UNSTAGE: service.unstage_lines,
        StagingAction.DISCARD: service.discard_lines,
    }
    return handlers[action](file_path, selection)
