"""
REPL module for the Leaf interactive shell.

This package provides the terminal host components: lexers for syntax
highlighting, completers, the dynamic prompt, the program editor and the
main shell controller.
"""

from leaf_playground.cli.repl.completer import CommandCompleter, LeafCompleter
from leaf_playground.cli.repl.controller import REPLController
from leaf_playground.cli.repl.editor import EditorSession, create_key_bindings
from leaf_playground.cli.repl.lexer import LeafLexer, ShellInputLexer, build_style, style_class
from leaf_playground.cli.repl.prompt import PromptBuilder

__all__ = [
    "CommandCompleter",
    "EditorSession",
    "LeafCompleter",
    "LeafLexer",
    "PromptBuilder",
    "REPLController",
    "ShellInputLexer",
    "build_style",
    "create_key_bindings",
    "style_class",
]
