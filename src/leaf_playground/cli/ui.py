"""
UI components module for the Leaf playground.

Provides styled terminal output using Rich library for the welcome banner,
transcript entries, highlighted source and error rendering.
"""

from typing import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from leaf_playground.core.classifier import Token, TokenCategory, TokenClassifier
from leaf_playground.core.language import HighlightTheme
from leaf_playground.core.transcript import OutputCategory, TranscriptEntry

LEAF_BANNER = r"""
 _                __
| |    ___  __ _ / _|
| |   / _ \/ _` | |_
| |__|  __/ (_| |  _|
|_____\___|\__,_|_|
"""

VERSION = "0.1.0"

# Host defaults per base theme; a theme's own rules override these.
BASE_PALETTES: dict[str, dict[TokenCategory, str]] = {
    "vs": {
        TokenCategory.KEYWORD: "0000ff",
        TokenCategory.CONTROL_KEYWORD: "af00db",
        TokenCategory.BOOLEAN: "0000ff",
        TokenCategory.NUMBER: "098658",
        TokenCategory.STRING: "a31515",
        TokenCategory.COMMENT: "008000",
    },
    "vs-dark": {
        TokenCategory.KEYWORD: "569cd6",
        TokenCategory.CONTROL_KEYWORD: "c586c0",
        TokenCategory.BOOLEAN: "569cd6",
        TokenCategory.NUMBER: "b5cea8",
        TokenCategory.STRING: "ce9178",
        TokenCategory.COMMENT: "6a9955",
    },
}

ENTRY_STYLES: dict[OutputCategory, str] = {
    OutputCategory.INFO: "blue",
    OutputCategory.OUTPUT: "",
    OutputCategory.ERROR: "red",
    OutputCategory.HELP: "cyan",
}


def theme_colors(theme: HighlightTheme) -> dict[TokenCategory, str]:
    """
    Resolve the foreground colour of every styled category for a theme.

    Args:
        theme: The highlighting theme.

    Returns:
        Mapping of category to hex colour (no ``#``); unstyled categories
        are absent.
    """
    colors = dict(BASE_PALETTES.get(theme.base, {}))
    colors.update(theme.rules)
    return colors


def render_welcome_banner(console: Console, buffer_name: str | None = None) -> None:
    """
    Render the welcome banner with ASCII art and styled text.

    Args:
        console: Rich Console instance for output.
        buffer_name: Name of the program file, if any.
    """
    banner_text = Text(LEAF_BANNER, style="bold green")

    welcome_content = Text()
    welcome_content.append("Leaf Programming Language", style="bold white")
    welcome_content.append(f" v{VERSION}\n", style="dim")
    if buffer_name:
        welcome_content.append("Program: ", style="white")
        welcome_content.append(f"{buffer_name}\n", style="bold cyan")
    welcome_content.append("\nType ", style="white")
    welcome_content.append("help", style="bold green")
    welcome_content.append(" for available commands, ", style="white")
    welcome_content.append("Ctrl+D", style="bold yellow")
    welcome_content.append(" to quit.", style="white")

    full_content = Text()
    full_content.append_text(banner_text)
    full_content.append("\n")
    full_content.append_text(welcome_content)

    console.print(Panel(full_content, border_style="green", padding=(0, 2)))


def render_entry(entry: TranscriptEntry, console: Console) -> None:
    """
    Render one transcript entry.

    Help text is framed in a panel; every other category prints as
    preformatted text in its category colour.

    Args:
        entry: The entry to render.
        console: Rich Console instance for output.
    """
    style = ENTRY_STYLES.get(entry.category, "")
    text = Text(entry.text, style=style)

    if entry.category is OutputCategory.HELP:
        console.print(Panel(text, border_style="cyan", expand=False))
    else:
        console.print(text, soft_wrap=True)


def render_entries(entries: Iterable[TranscriptEntry], console: Console) -> None:
    """Render transcript entries in order."""
    for entry in entries:
        render_entry(entry, console)


def highlight_source(
    source: str,
    classifier: TokenClassifier,
    theme: HighlightTheme,
) -> Text:
    """
    Build a Rich Text of ``source`` coloured by token category.

    Args:
        source: Program text.
        classifier: Classifier producing the token stream.
        theme: Theme supplying the colours.

    Returns:
        Styled text with the same characters as ``source``.
    """
    colors = theme_colors(theme)
    text = Text()
    for token in classifier.classify(source):
        color = colors.get(token.category)
        style = f"#{color}" if color else ""
        if token.category is TokenCategory.COMMENT:
            style = f"{style} italic".strip()
        text.append(token.text, style=style)
    return text


def render_tokens(tokens: list[Token], console: Console) -> None:
    """
    Render a table of classified spans.

    Args:
        tokens: Tokens to list.
        console: Rich Console instance for output.
    """
    table = Table(
        title="Tokens",
        title_style="bold cyan",
        border_style="blue",
        show_header=True,
        header_style="bold white",
    )

    table.add_column("Span", style="dim", no_wrap=True)
    table.add_column("Category", style="green", no_wrap=True)
    table.add_column("Text", style="white")

    for token in tokens:
        table.add_row(f"{token.start}-{token.end}", token.category.value, repr(token.text))

    console.print(table)


def render_error(message: str, console: Console) -> None:
    """
    Render an error message in a visually distinct red panel.

    Args:
        message: Error message to display.
        console: Rich Console instance for output.
    """
    error_text = Text()
    error_text.append("Error: ", style="bold red")
    error_text.append(message, style="red")

    console.print(
        Panel(
            error_text,
            border_style="red",
            title="[bold red]Error[/bold red]",
            expand=False,
        )
    )


def render_info(message: str, console: Console) -> None:
    """
    Render an informational message.

    Args:
        message: Info message to display.
        console: Rich Console instance for output.
    """
    console.print(f"[blue]Info:[/blue] {message}")
