"""Domain model for staging configuration.

Configuration is read from a YAML file (default `.linestage.yml` in the
repository root) and parsed once into a typed StagingConfig.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml


CONFIG_FILENAME = ".linestage.yml"
CONFIG_ENV_VAR = "LINESTAGE_CONFIG"


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class DiffOptions:
    """Options passed to `git diff` when fetching a file's diff.

    Attributes:
        context_lines: Number of context lines around changes (-U<n>)
        ignore_whitespace: Ignore all whitespace changes
        ignore_whitespace_eol: Ignore whitespace changes at end of line
    """

    context_lines: int = 3
    ignore_whitespace: bool = False
    ignore_whitespace_eol: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> DiffOptions:
        if not data:
            return cls()

        context_lines = data.get("context_lines", 3)
        if not isinstance(context_lines, int) or isinstance(context_lines, bool) or context_lines < 0:
            raise ValueError(f"context_lines must be a non-negative integer, got {context_lines!r}")

        return cls(
            context_lines=context_lines,
            ignore_whitespace=bool(data.get("ignore_whitespace", False)),
            ignore_whitespace_eol=bool(data.get("ignore_whitespace_eol", False)),
        )


@dataclass(frozen=True)
class StagingConfig:
    """Settings for fetching diffs and applying partial patches.

    Attributes:
        diff_options: Options for `git diff`
        unidiff_zero: Pass --unidiff-zero to `git apply`
    """

    diff_options: DiffOptions = field(default_factory=DiffOptions)
    unidiff_zero: bool = True

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict | None) -> StagingConfig:
        """Parse config from a YAML mapping. Unknown keys are ignored."""
        if not data:
            return cls()
        return cls(
            diff_options=DiffOptions.from_dict(data),
            unidiff_zero=bool(data.get("unidiff_zero", True)),
        )

    @classmethod
    def from_file(cls, file_path: Path) -> StagingConfig:
        """Load config from a YAML file.

        Raises:
            ValueError: If the file cannot be read or is not a YAML mapping
        """
        try:
            data = yaml.safe_load(file_path.read_text())
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to load config {file_path}: {e}")

        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Config {file_path} must contain a YAML mapping")

        try:
            return cls.from_dict(data)
        except ValueError as e:
            raise ValueError(f"Invalid config {file_path}: {e}")

    @classmethod
    def load(cls, repo_path: str | Path = ".", config_path: str | Path | None = None) -> StagingConfig:
        """Resolve and load the effective config.

        Lookup order: explicit config_path, then $LINESTAGE_CONFIG, then
        `.linestage.yml` in repo_path. A missing default file yields defaults;
        a missing explicit file is an error.
        """
        explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            path = Path(explicit)
            if not path.is_file():
                raise ValueError(f"Config file does not exist: {path}")
            return cls.from_file(path)

        default_path = Path(repo_path) / CONFIG_FILENAME
        if default_path.is_file():
            return cls.from_file(default_path)
        return cls()

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def with_overrides(
        self,
        context_lines: int | None = None,
        ignore_whitespace: bool | None = None,
        unidiff_zero: bool | None = None,
    ) -> StagingConfig:
        """Return a copy with command line overrides applied (None keeps the file value)."""
        diff_options = self.diff_options
        if context_lines is not None:
            diff_options = replace(diff_options, context_lines=context_lines)
        if ignore_whitespace is not None:
            diff_options = replace(diff_options, ignore_whitespace=ignore_whitespace)
        return replace(
            self,
            diff_options=diff_options,
            unidiff_zero=self.unidiff_zero if unidiff_zero is None else unidiff_zero,
        )
