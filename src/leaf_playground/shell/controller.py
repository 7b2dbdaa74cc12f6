"""
Shell controller for the Leaf playground.

Consumes one committed input line at a time and turns it into transcript
entries, session changes, or a run cycle.
"""

import logging
from typing import Callable, Optional

from leaf_playground.core.session import SessionState
from leaf_playground.shell.commands import (
    HELP_TEXT,
    RUNNING_TEXT,
    Builtin,
    ShellCommand,
    Unrecognized,
    parse_shell_command,
)
from leaf_playground.shell.dispatch import RunRejected
from leaf_playground.shell.pipeline import RunPipeline

logger = logging.getLogger(__name__)


class ShellController:
    """
    Line-at-a-time command processor.

    There is a single state, waiting for a line: each ``submit`` handles one
    line completely (a run is only started, not awaited) and returns.

    Attributes:
        session: Session state the controller writes to.
        pipeline: Run pipeline started by the ``run`` command.
    """

    def __init__(
        self,
        session: SessionState,
        pipeline: RunPipeline,
        on_submit: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            session: Session state shared with the host.
            pipeline: Pipeline used for ``run``.
            on_submit: Host hook called after every submission, used to
                scroll to and refocus the input line.
        """
        self.session = session
        self.pipeline = pipeline
        self._on_submit = on_submit

    def set_submit_hook(self, hook: Optional[Callable[[], None]]) -> None:
        """Replace the host hook called after every submission."""
        self._on_submit = hook

    def submit(self, raw_line: str) -> ShellCommand:
        """
        Process one committed input line.

        Args:
            raw_line: The line as typed; it is matched exactly, untrimmed.

        Returns:
            The command the line was classified as.
        """
        command = parse_shell_command(raw_line)
        logger.debug(f"Shell input {raw_line!r} -> {command!r}")

        if command is Builtin.CLEAR:
            self.session.transcript.clear()
        elif command is Builtin.HELP:
            self.session.transcript.help(HELP_TEXT)
        elif command is Builtin.RUN:
            self._start_run()
        elif isinstance(command, Unrecognized):
            self.session.transcript.error(command.message)

        self._notify_host()
        return command

    def run(self) -> None:
        """Start a run cycle, as the toolbar Run action does."""
        self._start_run()
        self._notify_host()

    def _start_run(self) -> None:
        transcript = self.session.transcript
        # Refusals are decided before the info entry so a refused run gets one entry
        reason = self.pipeline.refusal()
        if reason is not None:
            self.session.show_transcript()
            transcript.error(reason)
            return

        transcript.info(RUNNING_TEXT)
        try:
            self.pipeline.start()
        except RunRejected as e:
            self.session.show_transcript()
            transcript.error(e.message)

    def _notify_host(self) -> None:
        if self._on_submit is None:
            return
        try:
            self._on_submit()
        except Exception:
            logger.exception("Host submit hook failed")
