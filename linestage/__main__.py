#!/usr/bin/env python3
"""CLI entry point for linestage.

Usage:
    python -m linestage <command> [options]

Commands:
    show-diff     Print a single-file diff with "hunk:line" selection keys
    build-patch   Print the patch for selected lines of a diff
    stage         Stage selected lines (or a hunk) of a file
    unstage       Unstage selected lines (or a hunk) of a file
    discard       Discard selected working tree lines (or a hunk) of a file
"""

import argparse
import sys

from linestage.commands.build_patch import cmd_build_patch
from linestage.commands.show_diff import cmd_show_diff
from linestage.commands.stage import cmd_stage
from linestage.services.staging import StagingAction


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--lines",
        action="append",
        default=[],
        help="Line keys as hunk:line, comma-separated or repeated (e.g. 0:1,0:3)",
    )
    parser.add_argument(
        "--hunk",
        type=int,
        default=None,
        help="Select a whole hunk by index instead of individual lines",
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="linestage",
        description="Stage, unstage or discard individual lines of a file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  show-diff     Print a single-file diff with "hunk:line" selection keys
  build-patch   Print the patch for selected lines of a diff
  stage         Stage selected lines (or a hunk) of a file
  unstage       Unstage selected lines (or a hunk) of a file
  discard       Discard selected working tree lines (or a hunk) of a file

Examples:
  git diff -- src/app.py | python -m linestage show-diff
  git diff -- src/app.py | python -m linestage build-patch --lines 0:2,0:5
  python -m linestage stage src/app.py --list
  python -m linestage stage src/app.py --lines 0:2 --lines 1:4
  python -m linestage unstage src/app.py --hunk 1 --dry-run
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # show-diff command
    parser_show = subparsers.add_parser(
        "show-diff",
        help="Print a single-file diff with selection keys",
    )
    parser_show.add_argument(
        "--input-file",
        help="Path to diff file (raw diff or FileDiff JSON). If not provided, reads from stdin",
    )
    parser_show.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # build-patch command
    parser_build = subparsers.add_parser(
        "build-patch",
        help="Print the patch for selected lines of a diff",
    )
    parser_build.add_argument(
        "--input-file",
        help="Path to diff file (raw diff or FileDiff JSON). If not provided, reads from stdin",
    )
    _add_selection_arguments(parser_build)
    parser_build.add_argument(
        "--reverse",
        action="store_true",
        help="Build the patch for reverse application (git apply -R)",
    )

    # stage / unstage / discard commands
    for action in StagingAction:
        parser_action = subparsers.add_parser(
            action.value,
            help=f"{action.value.capitalize()} selected lines (or a hunk) of a file",
        )
        parser_action.add_argument("file", help="File path relative to the repository root")
        _add_selection_arguments(parser_action)
        parser_action.add_argument(
            "--repo-path",
            default=".",
            help="Path to the git repository (default: current directory)",
        )
        parser_action.add_argument(
            "--config",
            default=None,
            help="Config file (default: $LINESTAGE_CONFIG or .linestage.yml in the repo)",
        )
        parser_action.add_argument(
            "--context-lines",
            type=int,
            default=None,
            help="Context lines for git diff (overrides config)",
        )
        parser_action.add_argument(
            "--ignore-whitespace",
            action="store_true",
            default=None,
            help="Ignore whitespace changes when computing the diff",
        )
        parser_action.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the patch instead of applying it",
        )
        parser_action.add_argument(
            "--list",
            action="store_true",
            help="Print the diff this command works on, with line keys, and exit",
        )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    # Route to command implementations with explicit parameters
    if args.command == "show-diff":
        return cmd_show_diff(
            input_file=args.input_file,
            output_format=args.format,
        )

    elif args.command == "build-patch":
        return cmd_build_patch(
            input_file=args.input_file,
            lines=args.lines,
            hunk_index=args.hunk,
            reverse=args.reverse,
        )

    elif args.command in {action.value for action in StagingAction}:
        return cmd_stage(
            action=StagingAction(args.command),
            file_path=args.file,
            lines=args.lines,
            hunk_index=args.hunk,
            repo_path=args.repo_path,
            config_path=args.config,
            context_lines=args.context_lines,
            ignore_whitespace=args.ignore_whitespace,
            dry_run=args.dry_run,
            list_lines=args.list,
        )

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
