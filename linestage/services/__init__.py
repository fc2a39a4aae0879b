"""Services for linestage.

Services encapsulate business logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from linestage.services.git_operations import (
    GitApplyError,
    GitDiffError,
    GitError,
    GitOperationsService,
    GitRepositoryError,
)
from linestage.services.patch_builder import (
    generate_hunk_patch,
    generate_partial_patch,
    is_line_selectable,
)
from linestage.services.staging import (
    BinaryFileError,
    LineStagingService,
    StagingAction,
    StagingResult,
)

__all__ = [
    "BinaryFileError",
    "GitApplyError",
    "GitDiffError",
    "GitError",
    "GitOperationsService",
    "GitRepositoryError",
    "LineStagingService",
    "StagingAction",
    "StagingResult",
    "generate_hunk_patch",
    "generate_partial_patch",
    "is_line_selectable",
]
