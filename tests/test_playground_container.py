"""
Tests for the playground container and the terminal shell host.
"""

import io

import pytest
from prompt_toolkit.application import create_app_session
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import DummyOutput
from rich.console import Console

from leaf_playground.cli.repl import EditorSession, REPLController
from leaf_playground.container import create_playground
from leaf_playground.core.buffer import InMemoryTextBuffer
from leaf_playground.core.classifier import TokenClassifier
from leaf_playground.core.config import PlaygroundConfig, RunConfig, SessionConfig
from leaf_playground.core.engine import UnconfiguredEngine
from leaf_playground.core.language import DARK_THEME, LEAF_LANGUAGE, LIGHT_THEME
from leaf_playground.core.session import DEFAULT_FONT_SIZE, Theme
from leaf_playground.shell import RunPolicy
from tests.support.engines import RecordingEngine


@pytest.fixture
def console_buffer():
    return io.StringIO()


@pytest.fixture
def console(console_buffer):
    return Console(file=console_buffer, width=100, color_system=None)


@pytest.fixture
def terminal():
    with create_pipe_input() as pipe_input:
        with create_app_session(input=pipe_input, output=DummyOutput()):
            yield pipe_input


class TestCreatePlayground:
    """Wiring from configuration."""

    def test_session_defaults_from_config(self):
        config = PlaygroundConfig(
            session=SessionConfig(theme="dark", font_size=14, transcript_visible=True),
            run=RunConfig(policy="serial", timeout=3.0),
        )

        playground = create_playground(InMemoryTextBuffer("x"), config)

        assert playground.session.theme is Theme.DARK
        assert playground.session.font_size == 14
        assert playground.session.transcript_visible is True
        assert playground.dispatcher.policy is RunPolicy.SERIAL
        assert playground.pipeline.timeout == 3.0
        assert isinstance(playground.engine, UnconfiguredEngine)

    def test_explicit_engine_wins(self):
        engine = RecordingEngine(["1"])
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=engine
        )

        assert playground.engine is engine
        assert playground.pipeline.engine is engine
        assert playground.shell.pipeline is playground.pipeline

    def test_invalid_font_size_rejected(self):
        config = PlaygroundConfig(session=SessionConfig(font_size=0))

        with pytest.raises(ValueError):
            create_playground(InMemoryTextBuffer("x"), config)


class TestREPLController:
    """Transcript rendering in the terminal host."""

    def test_entries_rendered_as_appended(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console, buffer_name="main.leaf")
        playground.session.show_transcript()

        assert controller.handle_input("help") is True
        controller.handle_input("nope")

        output = console_buffer.getvalue()
        assert "Leaf Programming Language Help" in output
        assert "'nope' is not a valid command" in output

    def test_clear_restarts_rendering(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)
        playground.session.show_transcript()

        controller.handle_input("first")
        controller.handle_input("clear")
        console_buffer.truncate(0)
        console_buffer.seek(0)
        controller.handle_input("second")

        output = console_buffer.getvalue()
        assert "'second' is not a valid command" in output
        assert "'first'" not in output

    @pytest.mark.asyncio
    async def test_run_results_rendered_when_they_arrive(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("print 3"), PlaygroundConfig(), engine=RecordingEngine(["3"])
        )
        controller = REPLController(playground, console=console)
        playground.session.show_transcript()

        controller.handle_input("run")
        assert "running code..." in console_buffer.getvalue()

        await playground.dispatcher.wait_idle()

        lines = console_buffer.getvalue().splitlines()
        assert lines[-2:] == ["running code...", "3"]
        assert playground.session.transcript_visible is True

    def test_hidden_transcript_renders_nothing(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)

        controller.handle_input("help")
        controller.handle_input("nope")

        assert playground.session.transcript_visible is False
        assert console_buffer.getvalue() == ""
        assert controller.unseen == 2
        assert "transcript hidden (2 new)" in controller.toolbar()

    def test_toggle_prints_missed_entries(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)
        controller.handle_input("nope")

        controller.toggle_transcript()

        assert playground.session.transcript_visible is True
        assert "'nope' is not a valid command" in console_buffer.getvalue()
        assert controller.unseen == 0
        assert "transcript shown" in controller.toolbar()

    def test_hide_stops_rendering(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)
        controller.toggle_transcript()

        controller.hide_transcript()
        controller.handle_input("later")

        assert playground.session.transcript_visible is False
        assert "'later'" not in console_buffer.getvalue()
        assert controller.unseen == 1

    def test_toolbar_shows_session_font_size(self, terminal, console):
        config = PlaygroundConfig(session=SessionConfig(theme="dark", font_size=18))
        playground = create_playground(
            InMemoryTextBuffer("x"), config, engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)

        toolbar = controller.toolbar()

        assert "18pt" in toolbar
        assert "dark theme" in toolbar
        assert "F2 toggle" in toolbar

    def test_function_keys_bound(self, terminal, console):
        playground = create_playground(
            InMemoryTextBuffer("x"), PlaygroundConfig(), engine=RecordingEngine()
        )
        controller = REPLController(playground, console=console)

        keys = {binding.keys[0] for binding in controller.session.key_bindings.bindings}

        assert {Keys.F2, Keys.F3} <= keys

    @pytest.mark.asyncio
    async def test_run_shows_hidden_transcript(self, terminal, console, console_buffer):
        playground = create_playground(
            InMemoryTextBuffer("print 3"), PlaygroundConfig(), engine=RecordingEngine(["3"])
        )
        controller = REPLController(playground, console=console)
        controller.handle_input("help")

        controller.handle_input("run")
        await playground.dispatcher.wait_idle()

        output = console_buffer.getvalue()
        assert "Leaf Programming Language Help" in output
        assert output.splitlines()[-1] == "3"
        assert controller.unseen == 0


class TestEditorSession:
    """Editor host settings."""

    def test_toolbar_shows_font_size_and_theme(self, terminal):
        editor = EditorSession(LEAF_LANGUAGE, TokenClassifier(), DARK_THEME, font_size=18)

        toolbar = editor.toolbar()

        assert "18pt" in toolbar
        assert "dark theme" in toolbar
        assert LEAF_LANGUAGE.language_id in toolbar

    def test_default_font_size(self, terminal):
        editor = EditorSession(LEAF_LANGUAGE, TokenClassifier(), LIGHT_THEME)

        assert editor.font_size == DEFAULT_FONT_SIZE
        assert f"{DEFAULT_FONT_SIZE}pt" in editor.toolbar()
