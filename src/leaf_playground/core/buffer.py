"""
Program text buffers.

The run pipeline reads the program through ``get_current_text`` only; it never
writes back to the buffer.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from leaf_playground.core.language import DEFAULT_BUFFER_TEXT

logger = logging.getLogger(__name__)


@runtime_checkable
class TextBuffer(Protocol):
    """Read access to the single program buffer of a session."""

    def get_current_text(self) -> str:
        ...


class InMemoryTextBuffer:
    """Program buffer held in memory."""

    def __init__(self, text: str = DEFAULT_BUFFER_TEXT):
        self._text = text

    def get_current_text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text


class FileTextBuffer:
    """
    Program buffer backed by a file on disk.

    The file is read again on every call, so edits made by another program
    (or by the ``edit`` command) are picked up by the next run.
    """

    def __init__(self, path: Path | str, default_text: str = DEFAULT_BUFFER_TEXT):
        """
        Initialize the buffer.

        Args:
            path: Path of the program file.
            default_text: Text returned while the file does not exist.
        """
        self.path = Path(path)
        self._default_text = default_text

    @property
    def name(self) -> str:
        return self.path.name

    def get_current_text(self) -> str:
        """
        Return the file contents.

        Returns the default text when the file does not exist yet.

        Raises:
            OSError: If the file exists but cannot be read.
        """
        if not self.path.exists():
            logger.debug(f"Buffer file {self.path} missing, using default text")
            return self._default_text
        return self.path.read_text(encoding="utf-8")

    def save(self, text: str) -> None:
        """Write ``text`` to the backing file, creating parent directories."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")
