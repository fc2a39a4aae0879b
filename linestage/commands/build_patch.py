"""Build patch command.

Thin command that reads a single-file diff (raw text or FileDiff JSON) and
prints the patch for the selected lines or hunk. Nothing is applied.
"""

from __future__ import annotations

import sys

from linestage.domain.selection import LineSelection
from linestage.infrastructure.diff_io import parse_file_diff, read_diff
from linestage.services.patch_builder import generate_hunk_patch, generate_partial_patch


def cmd_build_patch(
    input_file: str | None = None,
    lines: list[str] | None = None,
    hunk_index: int | None = None,
    reverse: bool = False,
) -> int:
    """Print a partial patch for a diff.

    Args:
        input_file: Optional path to read diff from. If None, reads from stdin.
        lines: "hunk:line" tokens selecting lines (comma-separated allowed)
        hunk_index: Select a whole hunk instead of individual lines
        reverse: Build the patch for reverse application (unstage/discard)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    # --------------------------------------------------------
    # 1. Parse selection
    # --------------------------------------------------------
    if hunk_index is None and not lines:
        print("Nothing selected: pass --lines or --hunk", file=sys.stderr)
        return 1

    try:
        selection = LineSelection.from_strings(lines or [])
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 2. Read and parse diff
    # --------------------------------------------------------
    try:
        content = read_diff(input_file)
    except FileNotFoundError:
        print(f"Input file not found: {input_file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Failed to read diff: {e}", file=sys.stderr)
        return 1

    try:
        diff = parse_file_diff(content)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    if diff is None:
        print("Empty diff (no file section found)", file=sys.stderr)
        return 1
    if diff.binary:
        print(f"Cannot select lines of binary file: {diff.display_path}", file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 3. Build and print patch
    # --------------------------------------------------------
    if hunk_index is not None:
        patch = generate_hunk_patch(diff, hunk_index)
    else:
        patch = generate_partial_patch(diff, selection, reverse=reverse)

    if not patch:
        print("Selection produces no changes", file=sys.stderr)
        return 0

    sys.stdout.write(patch)
    return 0
