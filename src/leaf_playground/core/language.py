"""
Leaf language registration data and highlighting themes.

Describes what a highlighting host needs besides the token stream: the
language id, comment and bracket configuration, the default buffer text and
the two named colour themes.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from leaf_playground.core.classifier import TokenCategory

DEFAULT_BUFFER_TEXT = "# write some leaf code here\n# press F1 for command pallete"


class UnknownThemeError(KeyError):
    """Raised when a theme name is not one of the built-in themes."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown theme '{self.name}'. Available: {', '.join(THEMES)}"


@dataclass(frozen=True)
class LanguageDefinition:
    """
    Editor configuration for a language.

    Attributes:
        language_id: Identifier the host registers the language under.
        line_comment: Line comment marker.
        brackets: Matching bracket pairs.
        auto_closing_pairs: Pairs the editor closes automatically.
        default_text: Initial buffer contents for a new session.
    """

    language_id: str
    line_comment: str
    brackets: tuple[tuple[str, str], ...]
    auto_closing_pairs: tuple[tuple[str, str], ...]
    default_text: str = ""


LEAF_LANGUAGE = LanguageDefinition(
    language_id="leaf",
    line_comment="#",
    brackets=(("{", "}"), ("[", "]"), ("(", ")")),
    auto_closing_pairs=(("{", "}"), ("[", "]"), ("(", ")"), ('"', '"')),
    default_text=DEFAULT_BUFFER_TEXT,
)


@dataclass(frozen=True)
class HighlightTheme:
    """
    A named highlighting theme.

    Only categories present in ``rules`` get an explicit foreground; every
    other category is left to the host's defaults for ``base``.

    Attributes:
        name: Theme name (``dark`` or ``light``).
        base: Host base theme the rules inherit from.
        rules: Foreground colour (hex, no ``#``) per category.
    """

    name: str
    base: str
    rules: Mapping[TokenCategory, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    def foreground(self, category: TokenCategory) -> str | None:
        """Return the explicit foreground for ``category`` or None."""
        return self.rules.get(category)


DARK_THEME = HighlightTheme(
    name="dark",
    base="vs-dark",
    rules={
        TokenCategory.OPERATOR: "ffe8c9",
        TokenCategory.FUNCTION: "ffc475",
    },
)

LIGHT_THEME = HighlightTheme(
    name="light",
    base="vs",
    rules={
        TokenCategory.OPERATOR: "9017ff",
        TokenCategory.FUNCTION: "ff00ff",
    },
)

THEMES: dict[str, HighlightTheme] = {
    DARK_THEME.name: DARK_THEME,
    LIGHT_THEME.name: LIGHT_THEME,
}


def get_theme(name: str) -> HighlightTheme:
    """
    Look up a built-in theme by name.

    Raises:
        UnknownThemeError: If ``name`` is not a built-in theme.
    """
    try:
        return THEMES[name]
    except KeyError:
        raise UnknownThemeError(name) from None
