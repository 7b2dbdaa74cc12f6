"""
REPL controller module for the Leaf shell.

Hosts a ShellController in a terminal: prompt_toolkit reads committed lines,
Rich renders transcript entries as they are appended, and runs complete on
the same asyncio loop that reads input.
"""

import asyncio
import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.application import get_app_or_none
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console

from leaf_playground.cli.repl.completer import CommandCompleter
from leaf_playground.cli.repl.lexer import ShellInputLexer, build_style
from leaf_playground.cli.repl.prompt import PromptBuilder
from leaf_playground.cli.ui import render_entries, render_welcome_banner
from leaf_playground.container import Playground
from leaf_playground.core.language import HighlightTheme, get_theme
from leaf_playground.core.transcript import Transcript
from leaf_playground.shell.commands import builtin_names

logger = logging.getLogger(__name__)


class REPLController:
    """
    Interactive shell session controller.

    Attributes:
        playground: The wired session components.
        console: Rich console for styled output.
        session: prompt_toolkit session for input handling.
    """

    def __init__(
        self,
        playground: Playground,
        console: Optional[Console] = None,
        buffer_name: Optional[str] = None,
        theme: Optional[HighlightTheme] = None,
    ):
        """
        Initialize the REPL controller.

        Args:
            playground: Playground whose shell receives the input lines.
            console: Rich Console for output. Creates new one if None.
            buffer_name: Program file name shown in the prompt.
            theme: Highlighting theme. Defaults to the session's theme.
        """
        self.playground = playground
        self.console = console or Console()
        self._buffer_name = buffer_name
        self._prompt_builder = PromptBuilder(buffer_name)

        transcript = playground.session.transcript
        self._rendered = len(transcript)
        self._generation = transcript.generation
        self._unsubscribe = transcript.subscribe(self._on_transcript_changed)

        # The shell's scroll-to-input / refocus hook
        playground.shell.set_submit_hook(self._refresh_prompt)

        commands = builtin_names()
        self._theme = theme or get_theme(playground.session.theme.value)
        self.session: PromptSession = PromptSession(
            history=InMemoryHistory(),
            completer=CommandCompleter(commands),
            lexer=ShellInputLexer(commands),
            style=build_style(self._theme),
            key_bindings=self._create_key_bindings(),
            bottom_toolbar=self.toolbar,
            complete_while_typing=False,
        )

    def _create_key_bindings(self) -> KeyBindings:
        """F2 toggles the transcript like the Terminal button; F3 closes it."""
        bindings = KeyBindings()

        @bindings.add("f2")
        def _(event) -> None:
            self.toggle_transcript()

        @bindings.add("f3")
        def _(event) -> None:
            self.hide_transcript()

        return bindings

    def run(self) -> None:
        """
        Start the REPL main loop.

        Blocks until the user ends the session with Ctrl+D.
        """
        asyncio.run(self.run_async())

    async def run_async(self) -> None:
        """
        Run the read loop on the current event loop.

        Displays the welcome banner, then submits every committed line to
        the shell until EOF. Run results are rendered as they arrive, above
        the prompt.
        """
        render_welcome_banner(self.console, self._buffer_name)
        self.console.print()
        self.playground.session.show_transcript()

        try:
            with patch_stdout():
                while True:
                    try:
                        user_input = await self.session.prompt_async(
                            self._prompt_builder.get_prompt(),
                        )
                    except KeyboardInterrupt:
                        self.console.print("[yellow]Press Ctrl+D to leave.[/yellow]")
                        continue
                    except EOFError:
                        self.console.print("[cyan]Goodbye![/cyan]")
                        break

                    self.handle_input(user_input)
        finally:
            self._unsubscribe()
            self.playground.close()

    def handle_input(self, user_input: str) -> bool:
        """
        Submit one committed line to the shell.

        Args:
            user_input: Raw input string from the user.

        Returns:
            True to continue the REPL.
        """
        self.playground.shell.submit(user_input)
        return True

    def toggle_transcript(self) -> None:
        """Show or hide the transcript; showing it prints what was missed."""
        self.playground.session.toggle_transcript()
        self._flush()

    def hide_transcript(self) -> None:
        """Stop printing transcript entries until it is shown again."""
        self.playground.session.hide_transcript()
        self._refresh_prompt()

    @property
    def unseen(self) -> int:
        """Number of entries appended while the transcript was hidden."""
        return len(self.playground.session.transcript) - self._rendered

    def toolbar(self) -> str:
        """Return the bottom toolbar text."""
        session = self.playground.session
        if session.transcript_visible:
            state = "transcript shown"
        else:
            state = f"transcript hidden ({self.unseen} new)"
        return (
            f" {self._theme.name} theme | {session.font_size}pt | {state}"
            " | F2 toggle | F3 close"
        )

    def _on_transcript_changed(self, transcript: Transcript) -> None:
        if transcript.generation != self._generation:
            self._generation = transcript.generation
            self._rendered = 0
            if self.playground.session.transcript_visible:
                self.console.clear()
        self._flush()

    def _flush(self) -> None:
        # Entries appended while hidden stay pending until the transcript is shown
        if self.playground.session.transcript_visible:
            entries = self.playground.session.transcript.entries
            render_entries(entries[self._rendered:], self.console)
            self._rendered = len(entries)
        self._refresh_prompt()

    def _refresh_prompt(self) -> None:
        """Redraw the input line below the newest output."""
        app = get_app_or_none()
        if app is not None and app.is_running:
            app.invalidate()
