"""Infrastructure for reading diffs and formatting them for output.

Handles reading diff content from stdin or files (raw `git diff` text or the
JSON form produced by FileDiff.to_dict) and rendering a FileDiff with the
"hunk:line" keys used to select lines.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

from linestage.domain.diff import FileDiff
from linestage.services.patch_builder import LINE_PREFIXES, NO_NEWLINE_MARKER, is_line_selectable


# ============================================================
# Input Functions
# ============================================================


def read_diff_from_stdin() -> str:
    """Read diff content from stdin.

    Returns:
        Raw diff content as a string
    """
    return sys.stdin.read()


def read_diff_from_file(path: str | Path) -> str:
    """Read diff content from a file.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    with open(path, newline="") as f:
        return f.read()


def read_diff(input_file: str | None = None) -> str:
    """Read diff content from stdin or a file.

    Args:
        input_file: Optional path to read from. If None, reads from stdin.

    Returns:
        Raw diff content as a string
    """
    if input_file is None:
        return read_diff_from_stdin()
    return read_diff_from_file(input_file)


def parse_file_diff(content: str) -> FileDiff | None:
    """Parse diff content given either as raw diff text or as FileDiff JSON.

    Returns:
        Parsed FileDiff, or None if the content holds no file diff

    Raises:
        ValueError: If the content is malformed JSON or spans several files
    """
    stripped = content.lstrip()
    if stripped.startswith("{"):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid diff JSON: {e}")
        try:
            return FileDiff.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid diff JSON: missing or malformed field {e}")
    return FileDiff.from_diff_content(content)


# ============================================================
# Output Functions
# ============================================================


def format_file_diff_as_json(diff: FileDiff) -> str:
    return json.dumps(diff.to_dict(), indent=2)


def format_file_diff_as_text(diff: FileDiff) -> str:
    """Format a FileDiff as text, one line per diff line with its selection key.

    Selectable lines are marked with "*", e.g.:

        Hunk 0: @@ -1,2 +1,3 @@
           0:0        1    1   line one
         * 0:1             2  +added line
    """
    lines = [f"File: {diff.display_path} ({diff.status.value})"]

    if diff.binary:
        lines.append("Binary file (no selectable lines)")
        return "\n".join(lines)

    if diff.is_empty:
        lines.append("Empty diff (no hunks found)")
        return "\n".join(lines)

    lines.append(f"Hunks: {len(diff.hunks)}  +{diff.additions} -{diff.deletions}")

    for hunk_index, hunk in enumerate(diff.hunks):
        lines.append("")
        lines.append(f"Hunk {hunk_index}: {hunk.header}")
        for line_index, line in enumerate(hunk.lines):
            marker = "*" if is_line_selectable(line.line_type) else " "
            key = f"{hunk_index}:{line_index}"
            old_no = "" if line.old_line_no is None else str(line.old_line_no)
            new_no = "" if line.new_line_no is None else str(line.new_line_no)
            prefix = LINE_PREFIXES.get(line.line_type, " ")
            lines.append(f" {marker} {key:<7}{old_no:>5}{new_no:>5}  {prefix}{line.content}")
            if line.no_newline:
                lines.append(f"{'':<22}{NO_NEWLINE_MARKER}")

    return "\n".join(lines)
