"""
Lexers for prompt_toolkit syntax highlighting.

Provides LeafLexer, which highlights Leaf program text from the
TokenClassifier's output, and ShellInputLexer, which highlights the shell
input line.
"""

from collections.abc import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from leaf_playground.cli.ui import theme_colors
from leaf_playground.core.classifier import TokenCategory, TokenClassifier
from leaf_playground.core.language import HighlightTheme


def style_class(category: TokenCategory) -> str:
    """Return the prompt_toolkit style class for a token category."""
    return "leaf." + category.name.lower().replace("_", "-")


def build_style(theme: HighlightTheme) -> Style:
    """
    Build the prompt_toolkit style for a highlighting theme.

    Args:
        theme: Theme whose colours to use.

    Returns:
        Style with one rule per coloured category plus the shell prompt rules.
    """
    rules = {
        "prompt": "#00aa00 bold",
        "prompt.buffer": "#00aaaa",
        "prompt.separator": "#888888",
        "command": "#00aa00 bold",
        "unknown": "#aaaa00",
    }
    for category, color in theme_colors(theme).items():
        rule = f"#{color}"
        if category is TokenCategory.COMMENT:
            rule += " italic"
        rules[style_class(category)] = rule
    return Style.from_dict(rules)


class LeafLexer(Lexer):
    """
    Lexer for Leaf program text.

    Every token gets the style class of its category, e.g.
    ``class:leaf.operator``; whitespace is left unstyled.
    """

    def __init__(self, classifier: TokenClassifier) -> None:
        """
        Initialize the lexer.

        Args:
            classifier: Classifier producing the token stream.
        """
        self._classifier = classifier

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        """
        Return a callable that returns tokens for a given line.

        Args:
            document: The document to lex.

        Returns:
            A callable that takes a line number and returns styled tokens.
        """
        lines = self._classifier.classify_lines(document.text)

        def get_line_tokens(line_number: int) -> StyleAndTextTuples:
            """Get tokens for a specific line."""
            if line_number >= len(lines):
                return []
            return [
                ("" if token.category is TokenCategory.WHITESPACE
                 else f"class:{style_class(token.category)}", token.text)
                for token in lines[line_number]
            ]

        return get_line_tokens


class ShellInputLexer(Lexer):
    """
    Lexer for the shell input line.

    The whole line is one command, so it is styled as ``command`` when it
    exactly matches a built-in and ``unknown`` otherwise.
    """

    def __init__(self, commands: list[str]) -> None:
        """
        Initialize the lexer with valid command names.

        Args:
            commands: List of valid command names to recognize.
        """
        self._commands = frozenset(commands)

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line_tokens(line_number: int) -> StyleAndTextTuples:
            if line_number >= len(lines):
                return []
            line = lines[line_number]
            if not line:
                return [("", line)]
            style = "class:command" if line in self._commands else "class:unknown"
            return [(style, line)]

        return get_line_tokens
