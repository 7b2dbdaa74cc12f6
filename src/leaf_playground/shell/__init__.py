"""
Shell Layer - Built-in commands, run dispatch, run pipeline and controller.
"""

from leaf_playground.shell.commands import (
    HELP_TEXT,
    RUNNING_TEXT,
    Builtin,
    ShellCommand,
    Unrecognized,
    builtin_names,
    parse_shell_command,
)
from leaf_playground.shell.controller import ShellController
from leaf_playground.shell.dispatch import (
    BUSY_MESSAGE,
    NO_LOOP_MESSAGE,
    RunDispatcher,
    RunPolicy,
    RunRejected,
)
from leaf_playground.shell.pipeline import (
    EMPTY_OUTPUT_TEXT,
    Failure,
    RunPipeline,
    RunResult,
    Success,
)

__all__ = [
    "BUSY_MESSAGE",
    "EMPTY_OUTPUT_TEXT",
    "HELP_TEXT",
    "NO_LOOP_MESSAGE",
    "RUNNING_TEXT",
    "Builtin",
    "Failure",
    "RunDispatcher",
    "RunPipeline",
    "RunPolicy",
    "RunRejected",
    "RunResult",
    "ShellCommand",
    "ShellController",
    "Success",
    "Unrecognized",
    "builtin_names",
    "parse_shell_command",
]
