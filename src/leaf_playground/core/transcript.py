"""
Transcript model for the Leaf shell.

The transcript is an ordered log of typed entries. Entries are immutable and
the log only grows, except for a full clear.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class OutputCategory(str, Enum):
    """Category tag used to style a transcript entry."""

    INFO = "info"
    OUTPUT = "output"
    ERROR = "error"
    HELP = "help"


@dataclass(frozen=True)
class TranscriptEntry:
    """One line (or block) of shell output."""

    category: OutputCategory
    text: str


TranscriptListener = Callable[["Transcript"], None]


class Transcript:
    """
    Append-only sequence of TranscriptEntry values.

    ``append`` and ``clear`` are the only mutators. Listeners registered with
    ``subscribe`` are called after every mutation.
    """

    def __init__(self) -> None:
        self._entries: list[TranscriptEntry] = []
        self._listeners: list[TranscriptListener] = []
        self._generation = 0

    @property
    def entries(self) -> tuple[TranscriptEntry, ...]:
        """Snapshot of the current entries."""
        return tuple(self._entries)

    @property
    def generation(self) -> int:
        """Number of clears so far; lets renderers detect a reset."""
        return self._generation

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranscriptEntry]:
        return iter(tuple(self._entries))

    def __getitem__(self, index: int) -> TranscriptEntry:
        return self._entries[index]

    def append(self, entry: TranscriptEntry) -> TranscriptEntry:
        """
        Append an entry.

        Args:
            entry: The entry to append.

        Returns:
            The appended entry.
        """
        self._entries.append(entry)
        self._notify()
        return entry

    def clear(self) -> None:
        """Remove every entry."""
        self._entries = []
        self._generation += 1
        self._notify()

    def info(self, text: str) -> TranscriptEntry:
        return self.append(TranscriptEntry(OutputCategory.INFO, text))

    def output(self, text: str) -> TranscriptEntry:
        return self.append(TranscriptEntry(OutputCategory.OUTPUT, text))

    def error(self, text: str) -> TranscriptEntry:
        return self.append(TranscriptEntry(OutputCategory.ERROR, text))

    def help(self, text: str) -> TranscriptEntry:
        return self.append(TranscriptEntry(OutputCategory.HELP, text))

    def subscribe(self, listener: TranscriptListener) -> Callable[[], None]:
        """
        Register a listener called after each mutation.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Transcript listener failed")
