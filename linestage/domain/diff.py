"""Domain models for single-file line-level diffs.

Parse-once pattern: raw `git diff` output is parsed into type-safe models at
the boundary. FileDiff, DiffHunk and DiffLine are the only inputs the patch
builder reads; nothing downstream re-parses diff text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum


HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
DIFF_GIT_PATTERN = re.compile(r'^diff --git "?a/(.*?)"? "?b/(.*?)"?$')
DEV_NULL = "/dev/null"


# ============================================================
# Domain Models
# ============================================================


class DiffLineType(Enum):
    """Type of line in a diff hunk."""

    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"
    HEADER = "header"
    BINARY = "binary"


class DiffStatus(Enum):
    """The type of change for a file in a diff."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNTRACKED = "untracked"
    CONFLICTED = "conflicted"


@dataclass(frozen=True)
class DiffLine:
    """A single line within a diff hunk.

    Attributes:
        line_type: Context, addition, deletion (or a decorative header/binary line)
        content: The line text without its +/-/space prefix or trailing newline
        old_line_no: Line number in the old file (None for additions)
        new_line_no: Line number in the new file (None for deletions)
        no_newline: The line is the last of its side(s) and has no trailing
            newline (followed by "\\ No newline at end of file" in the diff)
    """

    line_type: DiffLineType
    content: str
    old_line_no: int | None = None
    new_line_no: int | None = None
    no_newline: bool = False

    @property
    def is_change(self) -> bool:
        """Check if this line is an addition or deletion."""
        return self.line_type in (DiffLineType.ADDITION, DiffLineType.DELETION)

    def to_dict(self) -> dict:
        return {
            "line_type": self.line_type.value,
            "content": self.content,
            "old_line_no": self.old_line_no,
            "new_line_no": self.new_line_no,
            "no_newline": self.no_newline,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DiffLine:
        return cls(
            line_type=DiffLineType(data["line_type"]),
            content=data.get("content", ""),
            old_line_no=data.get("old_line_no"),
            new_line_no=data.get("new_line_no"),
            no_newline=bool(data.get("no_newline", False)),
        )


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of changes sharing one @@ header.

    Invariant: context + deletion lines == old_lines and
    context + addition lines == new_lines.
    """

    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: tuple[DiffLine, ...] = ()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_hunk_lines(cls, hunk_lines: list[str]) -> DiffHunk | None:
        """Parse a hunk from its raw lines.

        Args:
            hunk_lines: Lines starting with the @@ header followed by the body

        Returns:
            Parsed DiffHunk, or None if the first line is not a valid @@ header
        """
        if not hunk_lines:
            return None

        match = HUNK_HEADER_PATTERN.match(hunk_lines[0])
        if not match:
            return None

        old_start = int(match.group(1))
        old_lines = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_lines = int(match.group(4)) if match.group(4) is not None else 1

        old_line = old_start
        new_line = new_start
        lines: list[DiffLine] = []

        for raw in hunk_lines[1:]:
            if raw.startswith("\\"):
                # "\ No newline at end of file" applies to the line before it
                if lines:
                    lines[-1] = replace(lines[-1], no_newline=True)
                continue
            if raw.startswith("+"):
                lines.append(DiffLine(DiffLineType.ADDITION, raw[1:], new_line_no=new_line))
                new_line += 1
            elif raw.startswith("-"):
                lines.append(DiffLine(DiffLineType.DELETION, raw[1:], old_line_no=old_line))
                old_line += 1
            elif raw.startswith(" "):
                lines.append(
                    DiffLine(DiffLineType.CONTEXT, raw[1:], old_line_no=old_line, new_line_no=new_line)
                )
                old_line += 1
                new_line += 1

        return cls(
            header=hunk_lines[0],
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
            lines=tuple(lines),
        )

    def to_dict(self) -> dict:
        return {
            "header": self.header,
            "old_start": self.old_start,
            "old_lines": self.old_lines,
            "new_start": self.new_start,
            "new_lines": self.new_lines,
            "lines": [line.to_dict() for line in self.lines],
        }

    @classmethod
    def from_dict(cls, data: dict) -> DiffHunk:
        old_start = data["old_start"]
        old_lines = data["old_lines"]
        new_start = data["new_start"]
        new_lines = data["new_lines"]
        return cls(
            header=data.get("header") or f"@@ -{old_start},{old_lines} +{new_start},{new_lines} @@",
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
            lines=tuple(DiffLine.from_dict(line) for line in data.get("lines", [])),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.line_type == DiffLineType.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.line_type == DiffLineType.DELETION)


@dataclass(frozen=True)
class FileDiff:
    """The full line-level diff of one file.

    Use from_diff_content() to parse raw `git diff` output for a single file.
    Binary diffs carry no hunks and must not be handed to the patch builder.
    """

    old_path: str | None
    new_path: str | None
    status: DiffStatus = DiffStatus.MODIFIED
    binary: bool = False
    hunks: tuple[DiffHunk, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_diff_content(cls, diff_content: str) -> FileDiff | None:
        """Parse `git diff` output for a single file.

        Args:
            diff_content: Raw output of `git diff -- <path>`

        Returns:
            Parsed FileDiff, or None if the content holds no file section

        Raises:
            ValueError: If the content describes more than one file
        """
        sections = _split_file_sections(diff_content)
        if not sections:
            return None
        if len(sections) > 1:
            raise ValueError(
                f"Expected a diff for a single file, found {len(sections)} files"
            )
        return cls._from_section(sections[0])

    @classmethod
    def _from_section(cls, section: list[str]) -> FileDiff:
        old_path: str | None = None
        new_path: str | None = None
        status = DiffStatus.MODIFIED
        binary = False
        hunks: list[DiffHunk] = []
        current_hunk: list[str] = []

        match = DIFF_GIT_PATTERN.match(section[0])
        if match:
            old_path = match.group(1)
            new_path = match.group(2)

        for line in section[1:]:
            if current_hunk:
                if line.startswith("@@"):
                    hunk = DiffHunk.from_hunk_lines(current_hunk)
                    if hunk:
                        hunks.append(hunk)
                    current_hunk = [line]
                else:
                    current_hunk.append(line)
                continue

            if line.startswith("@@"):
                current_hunk = [line]
            elif line.startswith("new file mode"):
                status = DiffStatus.ADDED
            elif line.startswith("deleted file mode"):
                status = DiffStatus.DELETED
            elif line.startswith("rename from "):
                status = DiffStatus.RENAMED
                old_path = line[len("rename from "):]
            elif line.startswith("rename to "):
                status = DiffStatus.RENAMED
                new_path = line[len("rename to "):]
            elif line.startswith("copy from "):
                status = DiffStatus.COPIED
                old_path = line[len("copy from "):]
            elif line.startswith("copy to "):
                status = DiffStatus.COPIED
                new_path = line[len("copy to "):]
            elif line.startswith("--- "):
                old_path = _strip_path_prefix(line[4:], "a/")
            elif line.startswith("+++ "):
                new_path = _strip_path_prefix(line[4:], "b/")
            elif line.startswith("Binary files") or line.startswith("GIT binary patch"):
                binary = True

        if current_hunk:
            hunk = DiffHunk.from_hunk_lines(current_hunk)
            if hunk:
                hunks.append(hunk)

        if status == DiffStatus.ADDED:
            old_path = None
        elif status == DiffStatus.DELETED:
            new_path = None

        return cls(
            old_path=old_path,
            new_path=new_path,
            status=status,
            binary=binary,
            hunks=() if binary else tuple(hunks),
        )

    def to_dict(self) -> dict:
        """Convert to a dictionary for JSON serialization."""
        return {
            "old_path": self.old_path,
            "new_path": self.new_path,
            "status": self.status.value,
            "binary": self.binary,
            "additions": self.additions,
            "deletions": self.deletions,
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> FileDiff:
        """Parse a FileDiff from a dictionary (e.g., from JSON).

        The additions/deletions counters are derived from the hunks and are
        ignored if present.
        """
        return cls(
            old_path=data.get("old_path"),
            new_path=data.get("new_path"),
            status=DiffStatus(data.get("status", DiffStatus.MODIFIED.value)),
            binary=data.get("binary", False),
            hunks=tuple(DiffHunk.from_dict(h) for h in data.get("hunks", [])),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def additions(self) -> int:
        return sum(hunk.additions for hunk in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(hunk.deletions for hunk in self.hunks)

    @property
    def is_empty(self) -> bool:
        """Check if the diff has no hunks."""
        return not self.hunks

    @property
    def display_path(self) -> str:
        return self.new_path or self.old_path or ""


# ============================================================
# Parsing Helpers
# ============================================================


def _split_file_sections(diff_content: str) -> list[list[str]]:
    """Split raw diff text into per-file line groups, each led by `diff --git`."""
    sections: list[list[str]] = []
    for line in diff_content.split("\n"):
        if line.startswith("diff --git"):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
    return sections


def _strip_path_prefix(path: str, prefix: str) -> str | None:
    path = path.rstrip("\t")
    if path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if path == DEV_NULL:
        return None
    if path.startswith(prefix):
        return path[len(prefix):]
    return path
