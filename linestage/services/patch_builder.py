"""Build unified-diff patches from a subset of a file's changed lines.

Pure functions over the FileDiff model: no I/O, no state, nothing cached.
The output is a complete patch for `git apply`, or "" when the selection
produces no change.

For each hunk that has a selected line:
- context lines are kept as context
- selected additions/deletions are kept as "+"/"-"
- unselected additions are dropped (they never exist in either image)
- unselected deletions become context (they exist in both images)
and the @@ counts are recomputed from the emitted lines. Hunk start lines are
copied from the source diff unchanged.

With reverse=True the patch is meant for `git apply -R` against the new side
(unstaging from the index, discarding from the working tree). There the
unselected additions are present in the target and become context, while
unselected deletions are absent and are dropped.

Lines that git marks with "\\ No newline at end of file" keep the marker on the
side copied from the source diff. On the rebuilt side only the last line may
carry it.
"""

from __future__ import annotations

from collections.abc import Iterable

from linestage.domain.diff import DiffHunk, DiffLine, DiffLineType, FileDiff
from linestage.domain.selection import SELECTABLE_LINE_TYPES, group_keys_by_hunk


LINE_PREFIXES = {
    DiffLineType.CONTEXT: " ",
    DiffLineType.ADDITION: "+",
    DiffLineType.DELETION: "-",
}

NO_NEWLINE_MARKER = "\\ No newline at end of file"


# ============================================================
# Public API
# ============================================================


def generate_partial_patch(
    diff: FileDiff,
    selection: Iterable[tuple[int, int]],
    reverse: bool = False,
) -> str:
    """Generate a patch containing only the selected lines of diff.

    Args:
        diff: Full diff of one (non-binary) file; not modified
        selection: LineSelection or any iterable of (hunk_index, line_index)
            pairs. Pairs outside the diff are ignored.
        reverse: Build the patch for reverse application (see module docstring)

    Returns:
        Unified diff text, or "" if no selected line produces a change
    """
    lines_by_hunk = group_keys_by_hunk(selection, diff)
    if not lines_by_hunk:
        return ""

    hunk_patches = []
    for hunk_index in sorted(lines_by_hunk):
        hunk_patch = _generate_partial_hunk(
            diff.hunks[hunk_index], lines_by_hunk[hunk_index], reverse
        )
        if hunk_patch:
            hunk_patches.append(hunk_patch)

    if not hunk_patches:
        return ""

    return _file_header(diff) + "".join(hunk_patches)


def generate_hunk_patch(diff: FileDiff, hunk_index: int) -> str:
    """Generate a patch for one whole hunk, as it appears in diff.

    Args:
        diff: Full diff of one (non-binary) file
        hunk_index: Index of the hunk in diff.hunks

    Returns:
        Unified diff text, or "" if hunk_index is out of range
    """
    if not 0 <= hunk_index < len(diff.hunks):
        return ""

    hunk = diff.hunks[hunk_index]
    header = hunk.header if hunk.header.endswith("\n") else hunk.header + "\n"
    body = "".join(
        _format_line(LINE_PREFIXES[line.line_type], line.content, line.no_newline)
        for line in hunk.lines
        if line.line_type in LINE_PREFIXES
    )
    return _file_header(diff) + header + body


def is_line_selectable(line_type: DiffLineType | str) -> bool:
    """Check if a line type may be selected (additions and deletions only)."""
    if isinstance(line_type, str):
        try:
            line_type = DiffLineType(line_type)
        except ValueError:
            return False
    return line_type in SELECTABLE_LINE_TYPES


# ============================================================
# Helpers
# ============================================================


def _file_header(diff: FileDiff) -> str:
    old_path = diff.old_path or diff.new_path or ""
    new_path = diff.new_path or diff.old_path or ""
    return (
        f"diff --git a/{old_path} b/{new_path}\n"
        f"--- a/{old_path}\n"
        f"+++ b/{new_path}\n"
    )


def _generate_partial_hunk(hunk: DiffHunk, selected: set[int], reverse: bool = False) -> str:
    """Rebuild one hunk with only the selected changes; "" if none remain."""
    # Unselected lines of this type survive as context; the other type is dropped.
    kept_type = DiffLineType.ADDITION if reverse else DiffLineType.DELETION
    emitted: list[tuple[str, DiffLine]] = []
    old_count = 0
    new_count = 0

    for index, line in enumerate(hunk.lines):
        is_selected = index in selected

        if line.line_type == DiffLineType.CONTEXT:
            emitted.append((" ", line))
            old_count += 1
            new_count += 1
        elif line.line_type == DiffLineType.ADDITION and is_selected:
            emitted.append(("+", line))
            new_count += 1
        elif line.line_type == DiffLineType.DELETION and is_selected:
            emitted.append(("-", line))
            old_count += 1
        elif line.line_type == kept_type:
            emitted.append((" ", line))
            old_count += 1
            new_count += 1

    if all(prefix == " " for prefix, _ in emitted):
        return ""

    header = f"@@ -{hunk.old_start},{old_count} +{hunk.new_start},{new_count} @@\n"
    return header + _render_partial_lines(emitted, reverse)


def _render_partial_lines(emitted: list[tuple[str, DiffLine]], reverse: bool) -> str:
    """Render emitted lines with their "no newline" markers.

    The side of the patch that is copied from the source diff (old when
    forward, new when reverse) keeps the source markers. On the rebuilt side
    only its last line may lack a newline. A context line that lacks one on
    the copied side but is followed by more lines on the rebuilt side is
    written as a "-"/"+" pair.
    """
    rebuilt_prefix = "-" if reverse else "+"
    rebuilt_last = max(
        (i for i, (prefix, _) in enumerate(emitted) if prefix in (" ", rebuilt_prefix)),
        default=-1,
    )

    parts = []
    for i, (prefix, line) in enumerate(emitted):
        if not line.no_newline:
            parts.append(_format_line(prefix, line.content))
        elif prefix == rebuilt_prefix:
            parts.append(_format_line(prefix, line.content, i == rebuilt_last))
        elif prefix != " " or i == rebuilt_last:
            parts.append(_format_line(prefix, line.content, True))
        else:
            parts.append(_format_line("-", line.content, not reverse))
            parts.append(_format_line("+", line.content, reverse))
    return "".join(parts)


def _format_line(prefix: str, content: str, no_newline: bool = False) -> str:
    text = f"{prefix}{content}\n"
    if no_newline:
        text += NO_NEWLINE_MARKER + "\n"
    return text
