"""Domain models for line selections within a FileDiff.

A selection is an immutable set of (hunk_index, line_index) keys. Keys are
plain integer pairs; the "hunk:line" string form exists only for parsing
command line input.

Selections may hold keys that no longer point at a line (e.g. after the diff
was refreshed). Those keys are never an error: group_by_hunk() drops them and
pruned() removes them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import NamedTuple

from linestage.domain.diff import DiffLineType, FileDiff


SELECTABLE_LINE_TYPES = frozenset({DiffLineType.ADDITION, DiffLineType.DELETION})


class LineKey(NamedTuple):
    """Position of a line: index of its hunk and index within that hunk's lines."""

    hunk_index: int
    line_index: int

    @classmethod
    def from_string(cls, value: str) -> LineKey:
        """Parse a "hunk:line" token.

        Raises:
            ValueError: If the token is not two non-negative integers joined by ':'
        """
        hunk_part, sep, line_part = value.strip().partition(":")
        if not sep or not hunk_part.isdigit() or not line_part.isdigit():
            raise ValueError(f"Invalid line key: {value!r}. Expected 'hunk:line', e.g. '0:3'")
        return cls(int(hunk_part), int(line_part))

    def __str__(self) -> str:
        return f"{self.hunk_index}:{self.line_index}"


@dataclass(frozen=True)
class LineSelection:
    """Immutable set of selected line keys.

    Every "mutating" helper returns a new LineSelection.
    """

    keys: frozenset[LineKey] = frozenset()

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_keys(cls, keys: Iterable[tuple[int, int]]) -> LineSelection:
        return cls(frozenset(LineKey(int(h), int(ln)) for h, ln in keys))

    @classmethod
    def from_strings(cls, tokens: Iterable[str]) -> LineSelection:
        """Parse "hunk:line" tokens; comma-separated tokens are split too.

        Args:
            tokens: e.g. ["0:1", "0:3,1:2"]

        Returns:
            LineSelection with one key per token

        Raises:
            ValueError: If any token is malformed
        """
        keys = []
        for token in tokens:
            for part in token.split(","):
                if part.strip():
                    keys.append(LineKey.from_string(part))
        return cls(frozenset(keys))

    @classmethod
    def for_hunk(cls, diff: FileDiff, hunk_index: int) -> LineSelection:
        """Select every selectable line in one hunk."""
        return cls(frozenset(k for k in selectable_keys(diff) if k.hunk_index == hunk_index))

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __iter__(self):
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)

    def is_selected(self, hunk_index: int, line_index: int) -> bool:
        return LineKey(hunk_index, line_index) in self.keys

    def sorted_keys(self) -> list[LineKey]:
        return sorted(self.keys)

    def toggled(self, key: tuple[int, int]) -> LineSelection:
        key = LineKey(*key)
        if key in self.keys:
            return LineSelection(self.keys - {key})
        return LineSelection(self.keys | {key})

    def with_range(
        self,
        diff: FileDiff,
        start: tuple[int, int],
        end: tuple[int, int],
    ) -> LineSelection:
        """Add every selectable line between start and end (inclusive).

        The range runs over selectable keys in document order, across hunk
        boundaries. If either endpoint is not a selectable line, only end is
        selected (replacing the current selection), mirroring a shift-click
        with no valid anchor.
        """
        ordered = selectable_keys(diff)
        start_key, end_key = LineKey(*start), LineKey(*end)
        if start_key not in ordered or end_key not in ordered:
            return LineSelection(frozenset({end_key}))

        first, last = sorted((ordered.index(start_key), ordered.index(end_key)))
        return LineSelection(self.keys | frozenset(ordered[first:last + 1]))

    def toggled_hunk(self, diff: FileDiff, hunk_index: int) -> LineSelection:
        """Select all selectable lines of a hunk, or deselect them if all are selected."""
        hunk_keys = LineSelection.for_hunk(diff, hunk_index).keys
        if not hunk_keys:
            return self
        if hunk_keys <= self.keys:
            return LineSelection(self.keys - hunk_keys)
        return LineSelection(self.keys | hunk_keys)

    def cleared(self) -> LineSelection:
        return LineSelection()

    def pruned(self, diff: FileDiff) -> LineSelection:
        """Drop keys that no longer reference a selectable line in diff."""
        valid = set(selectable_keys(diff))
        return LineSelection(frozenset(k for k in self.keys if k in valid))

    def group_by_hunk(self, diff: FileDiff) -> dict[int, set[int]]:
        """Group keys by hunk index, dropping keys outside the diff.

        Returns:
            Mapping of hunk index to selected line indices, for hunks with at
            least one in-range key
        """
        return group_keys_by_hunk(self.keys, diff)


# ============================================================
# Helpers
# ============================================================


def selectable_keys(diff: FileDiff) -> list[LineKey]:
    """Every selectable line key in document order."""
    return [
        LineKey(hunk_index, line_index)
        for hunk_index, hunk in enumerate(diff.hunks)
        for line_index, line in enumerate(hunk.lines)
        if line.line_type in SELECTABLE_LINE_TYPES
    ]


def group_keys_by_hunk(keys: Iterable[tuple[int, int]], diff: FileDiff) -> dict[int, set[int]]:
    """Group (hunk, line) pairs by hunk index, dropping out-of-range references."""
    grouped: dict[int, set[int]] = {}
    hunk_count = len(diff.hunks)
    for hunk_index, line_index in keys:
        if not 0 <= hunk_index < hunk_count:
            continue
        if not 0 <= line_index < len(diff.hunks[hunk_index].lines):
            continue
        grouped.setdefault(hunk_index, set()).add(line_index)
    return grouped
