"""
Core Layer - Token classification, transcript, session state and collaborators.
"""

from leaf_playground.core.buffer import FileTextBuffer, InMemoryTextBuffer, TextBuffer
from leaf_playground.core.classifier import (
    BOOLEAN_LITERALS,
    Suggestion,
    Token,
    TokenCategory,
    TokenClassifier,
)
from leaf_playground.core.config import (
    EditorConfig,
    LoggingConfig,
    PlaygroundConfig,
    RunConfig,
    SessionConfig,
    load_config,
)
from leaf_playground.core.engine import (
    CallableEngine,
    EngineLoadError,
    ExecutionEngine,
    ExecutionError,
    UnconfiguredEngine,
    describe_error,
    load_engine,
)
from leaf_playground.core.language import (
    DARK_THEME,
    DEFAULT_BUFFER_TEXT,
    LEAF_LANGUAGE,
    LIGHT_THEME,
    THEMES,
    HighlightTheme,
    LanguageDefinition,
    UnknownThemeError,
    get_theme,
)
from leaf_playground.core.session import DEFAULT_FONT_SIZE, SessionState, Theme
from leaf_playground.core.transcript import OutputCategory, Transcript, TranscriptEntry
from leaf_playground.core.vocabulary import LEAF_VOCABULARY, WordClassTable

__all__ = [
    # Classifier
    "BOOLEAN_LITERALS",
    "Suggestion",
    "Token",
    "TokenCategory",
    "TokenClassifier",
    "LEAF_VOCABULARY",
    "WordClassTable",
    # Language
    "DARK_THEME",
    "DEFAULT_BUFFER_TEXT",
    "LEAF_LANGUAGE",
    "LIGHT_THEME",
    "THEMES",
    "HighlightTheme",
    "LanguageDefinition",
    "UnknownThemeError",
    "get_theme",
    # Session
    "DEFAULT_FONT_SIZE",
    "OutputCategory",
    "SessionState",
    "Theme",
    "Transcript",
    "TranscriptEntry",
    # Collaborators
    "CallableEngine",
    "EngineLoadError",
    "ExecutionEngine",
    "ExecutionError",
    "FileTextBuffer",
    "InMemoryTextBuffer",
    "TextBuffer",
    "UnconfiguredEngine",
    "describe_error",
    "load_engine",
    # Config
    "EditorConfig",
    "LoggingConfig",
    "PlaygroundConfig",
    "RunConfig",
    "SessionConfig",
    "load_config",
]
