"""
Leaf playground: highlighting, completion and a run shell for the Leaf
teaching language.
"""

from leaf_playground.container import Playground, create_playground
from leaf_playground.core import (
    OutputCategory,
    SessionState,
    TokenCategory,
    TokenClassifier,
    Transcript,
    TranscriptEntry,
)
from leaf_playground.shell import RunPipeline, RunPolicy, ShellController

__version__ = "0.1.0"

__all__ = [
    "OutputCategory",
    "Playground",
    "RunPipeline",
    "RunPolicy",
    "SessionState",
    "ShellController",
    "TokenCategory",
    "TokenClassifier",
    "Transcript",
    "TranscriptEntry",
    "create_playground",
    "__version__",
]
