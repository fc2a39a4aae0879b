"""Show diff command.

Prints a single-file diff with the "hunk:line" key of every line so the
caller can pick lines for build-patch or stage.
"""

from __future__ import annotations

import sys

from linestage.infrastructure.diff_io import (
    format_file_diff_as_json,
    format_file_diff_as_text,
    parse_file_diff,
    read_diff,
)


def cmd_show_diff(
    input_file: str | None = None,
    output_format: str = "text",
) -> int:
    """Print a diff with selection keys.

    Args:
        input_file: Optional path to read diff from. If None, reads from stdin.
        output_format: 'text' (default) or 'json'

    Returns:
        Exit code (0 for success, 1 for failure)
    """
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
        print("Empty diff (no file section found)")
        return 0

    if output_format == "json":
        print(format_file_diff_as_json(diff))
    else:
        print(format_file_diff_as_text(diff))
    return 0
