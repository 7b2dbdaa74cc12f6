"""
REPL prompt builder module.

Provides the shell prompt, showing the program file name when the session
is bound to one.
"""


class PromptBuilder:
    """
    Builds the shell prompt.

    Generates prompt tokens for prompt_toolkit: ``leaf.txt $ `` when a
    buffer name is known, ``$ `` otherwise.

    Attributes:
        _buffer_name: Display name of the program buffer, or None.
    """

    def __init__(self, buffer_name: str | None = None) -> None:
        """
        Initialize with the program buffer's display name.

        Args:
            buffer_name: File name of the program, or None for an
                in-memory buffer.
        """
        self._buffer_name = buffer_name

    def get_prompt(self) -> list[tuple[str, str]]:
        """
        Return prompt tokens for prompt_toolkit.

        Returns:
            List of (style_class, text) tuples for prompt_toolkit.
        """
        tokens: list[tuple[str, str]] = []

        if self._buffer_name:
            tokens.append(("class:prompt.buffer", self._buffer_name))
            tokens.append(("class:prompt.separator", " "))

        tokens.append(("class:prompt", "$ "))
        return tokens
