"""Line staging service.

Fetches a file's diff, builds a patch for the selected lines or hunk, and
hands it to git. Stage and discard work on the working-tree diff (working
tree vs index); unstage works on the staged diff (index vs HEAD) and applies
the patch in reverse.

Following the Service Layer pattern with constructor-based dependency
injection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from linestage.domain.config import StagingConfig
from linestage.domain.diff import FileDiff
from linestage.services.git_operations import GitOperationsService
from linestage.services.patch_builder import generate_hunk_patch, generate_partial_patch


class BinaryFileError(Exception):
    """Raised when line-level staging is requested for a binary file."""

    pass


class StagingAction(Enum):
    """What to do with the generated patch."""

    STAGE = "stage"
    UNSTAGE = "unstage"
    DISCARD = "discard"

    @property
    def uses_staged_diff(self) -> bool:
        return self == StagingAction.UNSTAGE

    @property
    def applies_in_reverse(self) -> bool:
        return self != StagingAction.STAGE


@dataclass(frozen=True)
class StagingResult:
    """Outcome of a staging operation.

    Attributes:
        action: The requested action
        file_path: The file the patch targets
        patch: The patch text sent to git ("" if there was nothing to apply)
        applied: Whether git was invoked
    """

    action: StagingAction
    file_path: str
    patch: str
    applied: bool


class LineStagingService:
    """Stage, unstage or discard selected lines and hunks of one file."""

    def __init__(
        self,
        git_service: GitOperationsService,
        config: StagingConfig | None = None,
    ):
        """Initialize with injected dependencies.

        Args:
            git_service: Git adapter used for diff and apply
            config: Diff and apply settings (defaults if None)
        """
        self.git_service = git_service
        self.config = config or StagingConfig()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def load_file_diff(self, file_path: str, staged: bool = False) -> FileDiff:
        """Fetch and parse the diff of one file.

        A file without changes yields a FileDiff with no hunks.
        """
        raw = self.git_service.get_file_diff(
            file_path, staged=staged, options=self.config.diff_options
        )
        diff = FileDiff.from_diff_content(raw)
        if diff is None:
            return FileDiff(old_path=file_path, new_path=file_path)
        return diff

    def stage_lines(self, file_path: str, selection: Iterable[tuple[int, int]]) -> StagingResult:
        return self._apply_lines(StagingAction.STAGE, file_path, selection)

    def unstage_lines(self, file_path: str, selection: Iterable[tuple[int, int]]) -> StagingResult:
        return self._apply_lines(StagingAction.UNSTAGE, file_path, selection)

    def discard_lines(self, file_path: str, selection: Iterable[tuple[int, int]]) -> StagingResult:
        return self._apply_lines(StagingAction.DISCARD, file_path, selection)

    def stage_hunk(self, file_path: str, hunk_index: int) -> StagingResult:
        return self._apply_hunk(StagingAction.STAGE, file_path, hunk_index)

    def unstage_hunk(self, file_path: str, hunk_index: int) -> StagingResult:
        return self._apply_hunk(StagingAction.UNSTAGE, file_path, hunk_index)

    def discard_hunk(self, file_path: str, hunk_index: int) -> StagingResult:
        return self._apply_hunk(StagingAction.DISCARD, file_path, hunk_index)

    def build_patch(
        self,
        action: StagingAction,
        file_path: str,
        selection: Iterable[tuple[int, int]] | None = None,
        hunk_index: int | None = None,
    ) -> str:
        """Build the patch an action would apply, without applying it.

        Exactly one of selection and hunk_index is used; hunk_index wins if
        both are given.

        Raises:
            BinaryFileError: If the file's diff is binary
        """
        diff = self.load_file_diff(file_path, staged=action.uses_staged_diff)
        if diff.binary:
            raise BinaryFileError(f"Cannot stage individual lines of binary file: {file_path}")

        if hunk_index is not None:
            return generate_hunk_patch(diff, hunk_index)
        return generate_partial_patch(
            diff, selection or (), reverse=action.applies_in_reverse
        )

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _apply_lines(
        self,
        action: StagingAction,
        file_path: str,
        selection: Iterable[tuple[int, int]],
    ) -> StagingResult:
        patch = self.build_patch(action, file_path, selection=selection)
        return self._send(action, file_path, patch)

    def _apply_hunk(self, action: StagingAction, file_path: str, hunk_index: int) -> StagingResult:
        patch = self.build_patch(action, file_path, hunk_index=hunk_index)
        return self._send(action, file_path, patch)

    def _send(self, action: StagingAction, file_path: str, patch: str) -> StagingResult:
        if not patch:
            return StagingResult(action=action, file_path=file_path, patch="", applied=False)

        unidiff_zero = self.config.unidiff_zero
        if action == StagingAction.STAGE:
            self.git_service.stage_patch(patch, unidiff_zero=unidiff_zero)
        elif action == StagingAction.UNSTAGE:
            self.git_service.unstage_patch(patch, unidiff_zero=unidiff_zero)
        else:
            self.git_service.discard_patch(patch, unidiff_zero=unidiff_zero)

        return StagingResult(action=action, file_path=file_path, patch=patch, applied=True)
