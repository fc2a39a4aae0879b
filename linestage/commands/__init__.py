"""CLI command implementations."""

from linestage.commands.build_patch import cmd_build_patch
from linestage.commands.show_diff import cmd_show_diff
from linestage.commands.stage import cmd_stage

__all__ = ["cmd_build_patch", "cmd_show_diff", "cmd_stage"]
