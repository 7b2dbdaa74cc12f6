"""
Session state shared by the shell and the hosting UI.

Field ownership:
- transcript and transcript visibility are written by the shell core;
- theme and font size are written by the hosting UI only.
"""

from dataclasses import dataclass, field
from enum import Enum

from leaf_playground.core.transcript import Transcript

DEFAULT_FONT_SIZE = 16


class Theme(str, Enum):
    """Active highlighting theme."""

    LIGHT = "light"
    DARK = "dark"


@dataclass
class SessionState:
    """
    Mutable state of one playground session.

    Attributes:
        theme: Active highlighting theme.
        font_size: Editor font size in points.
        transcript_visible: Whether the transcript panel is shown.
        transcript: The shell transcript.
    """

    theme: Theme = Theme.LIGHT
    font_size: int = DEFAULT_FONT_SIZE
    transcript_visible: bool = False
    transcript: Transcript = field(default_factory=Transcript)

    def __post_init__(self) -> None:
        self.theme = Theme(self.theme)
        self.set_font_size(self.font_size)

    def show_transcript(self) -> None:
        """Make the transcript panel visible."""
        self.transcript_visible = True

    def hide_transcript(self) -> None:
        """Hide the transcript panel (the panel's close control)."""
        self.transcript_visible = False

    def toggle_transcript(self) -> bool:
        """
        Flip transcript visibility.

        Returns:
            The new visibility.
        """
        self.transcript_visible = not self.transcript_visible
        return self.transcript_visible

    def set_theme(self, theme: Theme | str) -> None:
        """
        Switch the highlighting theme.

        Raises:
            ValueError: If ``theme`` is not a known theme name.
        """
        self.theme = Theme(theme)

    def set_font_size(self, size: int) -> None:
        """
        Set the editor font size.

        Raises:
            ValueError: If ``size`` is not a positive integer.
        """
        try:
            value = int(size)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Font size must be an integer, got {size!r}") from e
        if isinstance(size, float) and not size.is_integer():
            raise ValueError(f"Font size must be an integer, got {size!r}")
        if value <= 0:
            raise ValueError(f"Font size must be a positive integer, got {size!r}")
        self.font_size = value
