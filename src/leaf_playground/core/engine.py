"""
Execution engine boundary.

The Leaf interpreter is a black box: one call per run, taking the whole
program text and returning its output lines, or raising. This module defines
that contract, the minimal error shape, and how an engine is resolved from
configuration.
"""

import importlib
import logging
from typing import Any, Awaitable, Protocol, Sequence, Union, runtime_checkable

logger = logging.getLogger(__name__)

EngineOutput = Union[Sequence[Any], Awaitable[Sequence[Any]]]


class ExecutionError(Exception):
    """
    Error raised by an execution engine.

    Attributes:
        message: Human-readable description shown in the transcript.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EngineLoadError(Exception):
    """Raised when a configured engine cannot be imported."""

    pass


@runtime_checkable
class ExecutionEngine(Protocol):
    """Runs Leaf source and returns its output lines."""

    def run(self, source: str) -> EngineOutput:
        ...


class CallableEngine:
    """Adapts a plain ``run(source)`` function to the engine protocol."""

    def __init__(self, func):
        self._func = func

    def run(self, source: str) -> EngineOutput:
        return self._func(source)

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", repr(self._func))
        return f"CallableEngine({name})"


class UnconfiguredEngine:
    """Engine used when no interpreter has been configured."""

    MESSAGE = (
        "no Leaf engine is configured; set LEAF_RUN_ENGINE to "
        "'package.module:function' or pass --engine"
    )

    def run(self, source: str) -> EngineOutput:
        raise ExecutionError(self.MESSAGE)


def describe_error(error: object) -> str:
    """
    Convert anything an engine raised into a display string.

    A non-empty string ``message`` attribute wins; otherwise the value is
    stringified. Never raises.

    Args:
        error: The raised value.

    Returns:
        Text for a single error transcript entry.
    """
    try:
        message = getattr(error, "message", None)
    except Exception:
        message = None
    if isinstance(message, str) and message:
        return message

    try:
        text = str(error)
    except Exception:
        try:
            text = repr(error)
        except Exception:
            text = None
    if isinstance(text, str) and text:
        return text

    return type(error).__name__


def load_engine(path: str | None) -> ExecutionEngine:
    """
    Resolve an engine from an import path.

    ``path`` has the form ``package.module:attribute``. The attribute may be
    an object with a ``run`` method, a class (instantiated without
    arguments) or a plain function taking the source text. An empty path
    yields the UnconfiguredEngine.

    Args:
        path: Import path of the engine, or None.

    Returns:
        An object implementing ExecutionEngine.

    Raises:
        EngineLoadError: If the path is malformed or cannot be imported.
    """
    if not path:
        return UnconfiguredEngine()

    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise EngineLoadError(
            f"Invalid engine path '{path}', expected 'package.module:attribute'"
        )

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise EngineLoadError(f"Cannot import engine module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise EngineLoadError(f"Engine '{path}' not found: {e}") from e

    if isinstance(target, type):
        target = target()

    if isinstance(target, ExecutionEngine):
        engine = target
    elif callable(target):
        engine = CallableEngine(target)
    else:
        raise EngineLoadError(f"Engine '{path}' is neither callable nor has a run() method")

    logger.debug(f"Loaded execution engine {engine!r} from {path}")
    return engine
