"""
Program editor for the Leaf playground.

A multi-line prompt_toolkit session configured as the Leaf highlighting
host: LeafLexer for the token stream, LeafCompleter for suggestions, the
theme's style and auto-closing pairs from the language definition.
"""

from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings

from leaf_playground.cli.repl.completer import LeafCompleter
from leaf_playground.cli.repl.lexer import LeafLexer, build_style
from leaf_playground.core.classifier import TokenClassifier
from leaf_playground.core.language import HighlightTheme, LanguageDefinition
from leaf_playground.core.session import DEFAULT_FONT_SIZE


def _insert_pair(opener: str, closer: str):
    def handler(event) -> None:
        buffer = event.current_buffer
        if opener == closer and buffer.document.current_char == closer:
            buffer.cursor_right()
            return
        buffer.insert_text(opener + closer)
        buffer.cursor_left()

    return handler


def _skip_closer(closer: str):
    def handler(event) -> None:
        buffer = event.current_buffer
        if buffer.document.current_char == closer:
            buffer.cursor_right()
        else:
            buffer.insert_text(closer)

    return handler


def create_key_bindings(language: LanguageDefinition) -> KeyBindings:
    """
    Build key bindings implementing the language's auto-closing pairs.

    Typing an opener inserts the pair and leaves the cursor between them;
    typing a closer right before the same closer steps over it.

    Args:
        language: Language definition with the auto-closing pairs.

    Returns:
        KeyBindings for the editor session.
    """
    bindings = KeyBindings()
    for opener, closer in language.auto_closing_pairs:
        bindings.add(opener)(_insert_pair(opener, closer))
        if closer != opener:
            bindings.add(closer)(_skip_closer(closer))
    return bindings


class EditorSession:
    """
    Interactive editor for one program buffer.

    Attributes:
        language: Language registration data.
        classifier: Classifier used by the lexer and completer.
        theme: Active highlighting theme.
    """

    def __init__(
        self,
        language: LanguageDefinition,
        classifier: TokenClassifier,
        theme: HighlightTheme,
        font_size: int = DEFAULT_FONT_SIZE,
    ):
        """
        Initialize the editor.

        Args:
            language: Language definition (comment marker, pairs).
            classifier: Token classifier for highlighting and completion.
            theme: Highlighting theme.
            font_size: Session font size. A terminal cannot resize its
                font, so it is shown in the toolbar for the host to apply.
        """
        self.language = language
        self.classifier = classifier
        self.theme = theme
        self.font_size = font_size
        self.session: PromptSession = PromptSession(
            history=InMemoryHistory(),
            lexer=LeafLexer(classifier),
            completer=LeafCompleter(classifier),
            style=build_style(theme),
            key_bindings=create_key_bindings(language),
            multiline=True,
            complete_while_typing=True,
        )

    def edit(self, text: str) -> Optional[str]:
        """
        Let the user edit ``text``.

        Meta+Enter (Esc then Enter) accepts; Ctrl+C / Ctrl+D abandons.

        Args:
            text: Initial buffer contents.

        Returns:
            The edited text, or None if the edit was abandoned.
        """
        try:
            return self.session.prompt("", default=text, bottom_toolbar=self.toolbar())
        except (KeyboardInterrupt, EOFError):
            return None

    def toolbar(self) -> str:
        """Return the bottom toolbar text."""
        return (
            f" {self.language.language_id} | {self.theme.name} theme | {self.font_size}pt"
            " | Esc+Enter save | Ctrl+C discard"
        )
