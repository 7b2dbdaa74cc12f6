"""
Completers for the Leaf playground.

Provides LeafCompleter for program text (reserved words from the
TokenClassifier's suggestion list) and CommandCompleter for the shell's
built-in commands.
"""

from prompt_toolkit.completion import Completer, Completion

from leaf_playground.core.classifier import TokenCategory, TokenClassifier

# Shown next to each completion, like an editor's completion item kind
CATEGORY_META = {
    TokenCategory.KEYWORD: "keyword",
    TokenCategory.OPERATOR: "operator",
    TokenCategory.FUNCTION: "function",
}


class LeafCompleter(Completer):
    """
    Completion provider for Leaf source.

    Offers keyword, operator and function words that extend the letter run
    before the cursor.
    """

    def __init__(self, classifier: TokenClassifier):
        """
        Initialize the completer.

        Args:
            classifier: Classifier supplying the suggestion list.
        """
        self.classifier = classifier

    def get_completions(self, document, complete_event):
        """Generate completions for the word before the cursor."""
        replace_len, suggestions = self.classifier.complete(
            document.text, document.cursor_position
        )
        for suggestion in suggestions:
            yield Completion(
                suggestion.label,
                start_position=-replace_len,
                display_meta=CATEGORY_META.get(suggestion.category, suggestion.category.value),
            )


class CommandCompleter(Completer):
    """
    Completer for shell built-in commands.

    Commands take no arguments, so only the start of the line is completed.
    """

    def __init__(self, commands: list[str]):
        """
        Initialize the completer.

        Args:
            commands: Built-in command names.
        """
        self._command_names = list(commands)

    def get_completions(self, document, complete_event):
        """Generate completions for the current input."""
        text = document.text_before_cursor
        if " " in text:
            return
        for cmd in self._command_names:
            if cmd.startswith(text):
                yield Completion(cmd, start_position=-len(text))
