"""Domain models for linestage."""

from linestage.domain.config import DiffOptions, StagingConfig
from linestage.domain.diff import DiffHunk, DiffLine, DiffLineType, DiffStatus, FileDiff
from linestage.domain.selection import LineKey, LineSelection

__all__ = [
    "DiffHunk",
    "DiffLine",
    "DiffLineType",
    "DiffOptions",
    "DiffStatus",
    "FileDiff",
    "LineKey",
    "LineSelection",
    "StagingConfig",
]
