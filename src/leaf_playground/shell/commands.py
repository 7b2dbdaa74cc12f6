"""
Built-in shell commands.

A committed input line is classified by exact string comparison: no
trimming, no case folding, no arguments.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

HELP_TEXT = """Leaf Programming Language Help
  Commands:
  clear - clear the terminal
  help - show this help text
  run - run the code"""

RUNNING_TEXT = "running code..."


class Builtin(str, Enum):
    """The fixed set of built-in commands."""

    CLEAR = "clear"
    HELP = "help"
    RUN = "run"


@dataclass(frozen=True)
class Unrecognized:
    """A line that is not a built-in command."""

    raw_line: str

    @property
    def message(self) -> str:
        return f"'{self.raw_line}' is not a valid command"


ShellCommand = Union[Builtin, Unrecognized]

_BUILTINS = {command.value: command for command in Builtin}


def parse_shell_command(raw_line: str) -> ShellCommand:
    """
    Classify a raw input line.

    Args:
        raw_line: The line exactly as the user committed it.

    Returns:
        The matching Builtin, or Unrecognized carrying the line verbatim.

    Examples:
        >>> parse_shell_command("run")
        <Builtin.RUN: 'run'>

        >>> parse_shell_command(" run")
        Unrecognized(raw_line=' run')
    """
    command = _BUILTINS.get(raw_line)
    if command is None:
        return Unrecognized(raw_line)
    return command


def builtin_names() -> list[str]:
    """Return the names of the built-in commands."""
    return [command.value for command in Builtin]
