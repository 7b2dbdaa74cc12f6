"""
CLI for the Leaf playground.

Provides the command-line interface for the interactive shell, one-shot
runs, highlighting and the program editor.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.syntax import Syntax

from leaf_playground.cli.ui import (
    highlight_source,
    render_entries,
    render_error,
    render_info,
    render_tokens,
)
from leaf_playground.container import Playground, create_playground
from leaf_playground.core.buffer import FileTextBuffer
from leaf_playground.core.classifier import TokenClassifier
from leaf_playground.core.config import PlaygroundConfig, load_config
from leaf_playground.core.engine import EngineLoadError
from leaf_playground.core.language import LEAF_LANGUAGE, UnknownThemeError, get_theme
from leaf_playground.core.session import SessionState
from leaf_playground.core.transcript import OutputCategory, Transcript

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="leaf",
    help="Leaf playground - highlight, edit and run Leaf programs",
    add_completion=False,
)

# Errors that end a command with a message instead of a traceback
_USER_ERRORS = (
    EngineLoadError,
    UnknownThemeError,
    ValueError,
    OSError,
)

ConfigOption = typer.Option(
    None, "--config", "-c", help="Configuration file (.yaml, .yml or .json)"
)
ThemeOption = typer.Option(None, "--theme", "-t", help="Highlighting theme: light or dark")


@app.callback()
def main() -> None:
    """Leaf playground."""
    load_dotenv()


def _setup_logging(config: PlaygroundConfig) -> None:
    """Configure the root logger from the logging section."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.WARNING),
        format=config.logging.format,
    )


def _load_settings(
    config_path: Optional[Path],
    theme: Optional[str] = None,
    engine: Optional[str] = None,
    policy: Optional[str] = None,
    timeout: Optional[float] = None,
) -> PlaygroundConfig:
    """Load configuration and apply command-line overrides."""
    cfg = load_config(config_path)

    if theme is not None:
        get_theme(theme)
        cfg.session.theme = theme
    if engine is not None:
        cfg.run.engine = engine
    if policy is not None:
        cfg.run.policy = policy
    if timeout is not None:
        cfg.run.timeout = timeout
    cfg.run.validate()

    _setup_logging(cfg)
    return cfg


def _fail(error: BaseException) -> None:
    render_error(str(error), console)
    raise typer.Exit(1)


@app.command()
def shell(
    path: Optional[Path] = typer.Argument(None, help="Leaf program the shell runs"),
    theme: Optional[str] = ThemeOption,
    engine: Optional[str] = typer.Option(
        None, "--engine", "-e", help="Engine import path, e.g. leaf_compiler:run"
    ),
    policy: Optional[str] = typer.Option(
        None, "--policy", help="Overlapping runs: concurrent, serial or reject"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds before a run is reported as timed out"
    ),
    config_path: Optional[Path] = ConfigOption,
):
    """Start the interactive Leaf shell."""
    from leaf_playground.cli.repl import REPLController

    try:
        cfg = _load_settings(config_path, theme, engine, policy, timeout)
        program = path or Path("main.leaf")
        playground = create_playground(
            FileTextBuffer(program, cfg.editor.default_text), cfg
        )
    except _USER_ERRORS as e:
        _fail(e)

    controller = REPLController(playground, console=console, buffer_name=program.name)
    controller.run()


@app.command()
def run(
    path: Path = typer.Argument(..., help="Leaf program to run"),
    engine: Optional[str] = typer.Option(
        None, "--engine", "-e", help="Engine import path, e.g. leaf_compiler:run"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds before the run is reported as timed out"
    ),
    config_path: Optional[Path] = ConfigOption,
):
    """Run a Leaf program once and print its transcript."""
    if not path.exists():
        _fail(FileNotFoundError(f"Program not found: {path}"))

    try:
        cfg = _load_settings(config_path, engine=engine, timeout=timeout)
        playground = create_playground(FileTextBuffer(path), cfg)
    except _USER_ERRORS as e:
        _fail(e)

    transcript = run_once(playground)
    render_entries(transcript.entries, console)

    if transcript.entries and transcript.entries[-1].category is OutputCategory.ERROR:
        raise typer.Exit(1)


def run_once(playground: Playground) -> Transcript:
    """
    Perform one run cycle and wait for its result.

    Args:
        playground: Wired session components.

    Returns:
        The session transcript after the run.
    """

    async def cycle() -> None:
        playground.shell.run()
        await playground.dispatcher.wait_idle()

    try:
        asyncio.run(cycle())
    finally:
        playground.close()
    return playground.session.transcript


@app.command()
def highlight(
    path: Path = typer.Argument(..., help="Leaf program to display"),
    theme: Optional[str] = ThemeOption,
    line_numbers: bool = typer.Option(False, "--line-numbers", "-n", help="Show line numbers"),
    config_path: Optional[Path] = ConfigOption,
):
    """Print a Leaf program with syntax highlighting."""
    try:
        cfg = _load_settings(config_path, theme=theme)
        source = FileTextBuffer(path, cfg.editor.default_text).get_current_text()
        text = highlight_source(source, TokenClassifier(), get_theme(cfg.session.theme))
    except _USER_ERRORS as e:
        _fail(e)

    if line_numbers:
        for number, line in enumerate(text.split("\n", allow_blank=True), start=1):
            console.print(f"[dim]{number:>4}[/dim] ", line, sep="")
    else:
        console.print(text)


@app.command()
def tokens(
    path: Path = typer.Argument(..., help="Leaf program to classify"),
):
    """List the classified spans of a Leaf program."""
    if not path.exists():
        _fail(FileNotFoundError(f"Program not found: {path}"))

    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        _fail(e)

    render_tokens(TokenClassifier().classify(source), console)


@app.command()
def edit(
    path: Path = typer.Argument(..., help="Leaf program to edit"),
    theme: Optional[str] = ThemeOption,
    font_size: Optional[int] = typer.Option(
        None, "--font-size", help="Editor font size in points (positive integer)"
    ),
    config_path: Optional[Path] = ConfigOption,
):
    """Edit a Leaf program with highlighting and completion."""
    from leaf_playground.cli.repl import EditorSession

    try:
        cfg = _load_settings(config_path, theme=theme)
        session = SessionState(theme=cfg.session.theme, font_size=cfg.session.font_size)
        if font_size is not None:
            session.set_font_size(font_size)
        buffer = FileTextBuffer(path, cfg.editor.default_text)
        original = buffer.get_current_text()
        editor = EditorSession(
            LEAF_LANGUAGE,
            TokenClassifier(),
            get_theme(session.theme.value),
            font_size=session.font_size,
        )
    except _USER_ERRORS as e:
        _fail(e)

    edited = editor.edit(original)
    if edited is None or edited == original:
        render_info("No changes saved.", console)
        return

    try:
        buffer.save(edited)
    except OSError as e:
        _fail(e)
    console.print(f"[green]Saved[/green] {path}")


@app.command("config")
def show_config(
    config_path: Optional[Path] = ConfigOption,
):
    """Print the effective configuration."""
    try:
        cfg = _load_settings(config_path)
    except _USER_ERRORS as e:
        _fail(e)

    console.print(Syntax(cfg.to_yaml(), "yaml", theme="ansi_dark", background_color="default"))
