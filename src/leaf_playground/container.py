"""
Playground container module.

Wires one session's components together from configuration so the CLI
commands and tests build the shell the same way.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from leaf_playground.core.buffer import TextBuffer
from leaf_playground.core.classifier import TokenClassifier
from leaf_playground.core.config import PlaygroundConfig, load_config
from leaf_playground.core.engine import ExecutionEngine, load_engine
from leaf_playground.core.language import LEAF_LANGUAGE, LanguageDefinition
from leaf_playground.core.session import SessionState
from leaf_playground.shell.controller import ShellController
from leaf_playground.shell.dispatch import RunDispatcher
from leaf_playground.shell.pipeline import RunPipeline

logger = logging.getLogger(__name__)


@dataclass
class Playground:
    """
    Container holding the components of one playground session.

    Attributes:
        config: Effective configuration.
        session: Session state.
        buffer: The program buffer.
        classifier: Token classifier for highlighting and completion.
        language: Language registration data.
        engine: Execution engine.
        dispatcher: Run dispatcher.
        pipeline: Run pipeline.
        shell: Shell controller.
    """

    config: PlaygroundConfig
    session: SessionState
    buffer: TextBuffer
    classifier: TokenClassifier
    language: LanguageDefinition
    engine: ExecutionEngine
    dispatcher: RunDispatcher
    pipeline: RunPipeline
    shell: ShellController

    def close(self) -> None:
        """Cancel outstanding runs."""
        self.dispatcher.close()


def create_playground(
    buffer: TextBuffer,
    config: Optional[PlaygroundConfig] = None,
    engine: Optional[ExecutionEngine] = None,
    on_submit: Optional[Callable[[], None]] = None,
) -> Playground:
    """
    Create and wire all components of a session.

    Args:
        buffer: Program buffer the run pipeline reads.
        config: Configuration. Loaded from defaults and environment if None.
        engine: Execution engine. Resolved from ``config.run.engine`` if None.
        on_submit: Host hook invoked after every shell submission.

    Returns:
        Playground with initialized components.

    Raises:
        EngineLoadError: If the configured engine cannot be loaded.
        ValueError: If session defaults are invalid.
    """
    config = config or load_config()

    session = SessionState(
        theme=config.session.theme,
        font_size=config.session.font_size,
        transcript_visible=config.session.transcript_visible,
    )

    if engine is None:
        engine = load_engine(config.run.engine)

    dispatcher = RunDispatcher(config.run.policy)
    pipeline = RunPipeline(
        session=session,
        buffer=buffer,
        engine=engine,
        dispatcher=dispatcher,
        timeout=config.run.timeout,
        offload=config.run.offload,
    )
    shell = ShellController(session, pipeline, on_submit=on_submit)

    logger.debug(
        f"Created playground (engine={engine!r}, policy={dispatcher.policy.value}, "
        f"timeout={config.run.timeout})"
    )

    return Playground(
        config=config,
        session=session,
        buffer=buffer,
        classifier=TokenClassifier(),
        language=LEAF_LANGUAGE,
        engine=engine,
        dispatcher=dispatcher,
        pipeline=pipeline,
        shell=shell,
    )
