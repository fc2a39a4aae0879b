"""Git operations service.

Core service for git command operations. Encapsulates all subprocess calls
to git: fetching a single file's diff and applying patches to the index or
working tree.
"""

import subprocess
from pathlib import Path

from linestage.domain.config import DiffOptions


class GitError(Exception):
    """Base class for git command failures."""

    pass


class GitRepositoryError(GitError):
    """Raised when directory is not a git repository."""

    pass


class GitDiffError(GitError):
    """Raised when git diff command fails."""

    pass


class GitApplyError(GitError):
    """Raised when git apply rejects a patch."""

    pass


class GitOperationsService:
    """Core service for git command operations.

    Encapsulates all subprocess calls to git commands.
    Returns raw text; parsing into domain models happens in the caller.
    """

    def __init__(self, repo_path: str = "."):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
        """
        self.repo_path = Path(repo_path)

    def is_git_repository(self) -> bool:
        """Check if repo_path is inside a git repository.

        Returns:
            True if valid git repo, False otherwise
        """
        try:
            subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.repo_path,
                capture_output=True,
                check=True,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def get_file_diff(
        self,
        file_path: str,
        staged: bool = False,
        options: DiffOptions | None = None,
    ) -> str:
        """Get the diff of a single file.

        Args:
            file_path: Path to file in repository
            staged: If True, diff the index against HEAD; otherwise diff the
                working tree against the index
            options: Context and whitespace options

        Returns:
            Raw unified diff text (empty if the file has no changes)

        Raises:
            GitDiffError: If diff command fails
            GitRepositoryError: If not in a git repository
        """
        self._require_repository()
        options = options or DiffOptions()

        args = ["git", "diff", "--no-color", "--no-ext-diff", f"-U{options.context_lines}"]
        if staged:
            args.append("--cached")
        if options.ignore_whitespace:
            args.append("--ignore-all-space")
        if options.ignore_whitespace_eol:
            args.append("--ignore-space-at-eol")
        args.extend(["--", file_path])

        try:
            result = subprocess.run(
                args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitDiffError(f"Failed to compute diff for {file_path}: {e.stderr}")

    def apply_patch(
        self,
        patch: str,
        cached: bool,
        reverse: bool = False,
        unidiff_zero: bool = True,
    ) -> None:
        """Apply a patch with `git apply`, passing it on stdin.

        Args:
            patch: Unified diff text
            cached: Apply to the index instead of the working tree
            reverse: Apply the patch in reverse (-R)
            unidiff_zero: Accept hunks without context (--unidiff-zero)

        Raises:
            GitApplyError: If git rejects the patch
            GitRepositoryError: If not in a git repository
        """
        self._require_repository()

        args = ["git", "apply"]
        if cached:
            args.append("--cached")
        if unidiff_zero:
            args.append("--unidiff-zero")
        if reverse:
            args.append("-R")
        args.append("-")

        try:
            subprocess.run(
                args,
                cwd=self.repo_path,
                input=patch,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise GitApplyError(f"Failed to apply patch: {(e.stderr or '').strip()}")

    def stage_patch(self, patch: str, unidiff_zero: bool = True) -> None:
        """Apply patch to the index."""
        self.apply_patch(patch, cached=True, unidiff_zero=unidiff_zero)

    def unstage_patch(self, patch: str, unidiff_zero: bool = True) -> None:
        """Reverse-apply patch to the index."""
        self.apply_patch(patch, cached=True, reverse=True, unidiff_zero=unidiff_zero)

    def discard_patch(self, patch: str, unidiff_zero: bool = True) -> None:
        """Reverse-apply patch to the working tree."""
        self.apply_patch(patch, cached=False, reverse=True, unidiff_zero=unidiff_zero)

    def _require_repository(self) -> None:
        if not self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )
