"""linestage: stage, unstage or discard individual lines of a file.

Builds minimal unified-diff patches for an arbitrary selection of added and
removed lines, then hands them to `git apply`.

Usage:
    python -m linestage <command> [options]
    linestage <command> [options]

Structure:
    linestage/
    ├── __main__.py          # Entry point dispatcher
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # FileDiff, DiffHunk, DiffLine
    │   ├── selection.py     # LineKey, LineSelection
    │   └── config.py        # StagingConfig, DiffOptions
    ├── services/            # Business logic services
    │   ├── patch_builder.py # Partial patch generation
    │   ├── git_operations.py
    │   └── staging.py       # LineStagingService
    ├── infrastructure/      # Diff input/output
    │   └── diff_io.py
    └── commands/            # Thin command orchestrators
        ├── build_patch.py
        ├── show_diff.py
        └── stage.py
"""
