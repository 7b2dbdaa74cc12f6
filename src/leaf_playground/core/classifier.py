"""
Lexical classification of Leaf source text.

Provides the TokenClassifier used for syntax highlighting and completion.
Classification is total: every character of the input belongs to exactly one
token, and characters no rule recognises fall back to ``identifier``.
"""

import re
from dataclasses import dataclass
from enum import Enum

from leaf_playground.core.vocabulary import LEAF_VOCABULARY, WordClassTable


class TokenCategory(str, Enum):
    """Semantic class assigned to a lexical unit."""

    KEYWORD = "keyword"
    CONTROL_KEYWORD = "controlKeyword"
    OPERATOR = "operator"
    FUNCTION = "function"
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    COMMENT = "comment"
    WHITESPACE = "whitespace"


BOOLEAN_LITERALS = frozenset({"true", "false"})

# Alternatives are tried left to right at the current position, which gives
# the rule priority. The string rule accepts a missing closing quote so that
# an unterminated string runs to the end of input.
_TOKEN_PATTERN = re.compile(
    r"""
    (?P<word>[A-Za-z]+)
    | (?P<whitespace>\s+)
    | (?P<number>[0-9]+(?:\.[0-9]+)?)
    | (?P<string>"[^"]*(?:"|\Z))
    | (?P<comment>\#[^\n]*)
    """,
    re.VERBOSE,
)

_RULE_CATEGORIES = {
    "whitespace": TokenCategory.WHITESPACE,
    "number": TokenCategory.NUMBER,
    "string": TokenCategory.STRING,
    "comment": TokenCategory.COMMENT,
}

_WORD_PREFIX = re.compile(r"[A-Za-z]*\Z")


@dataclass(frozen=True)
class Token:
    """
    A classified span of source text.

    Attributes:
        start: Offset of the first character.
        end: Offset one past the last character.
        category: Category assigned to the span.
        text: The source text of the span.
    """

    start: int
    end: int
    category: TokenCategory
    text: str

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)


@dataclass(frozen=True)
class Suggestion:
    """A completion candidate tagged with the word class it came from."""

    label: str
    category: TokenCategory


class TokenClassifier:
    """
    Assigns every lexical unit of Leaf source to a TokenCategory.

    The classifier holds only its word table, so ``classify`` is a pure
    function of its input.
    """

    def __init__(self, table: WordClassTable = LEAF_VOCABULARY) -> None:
        """
        Initialize the classifier.

        Args:
            table: Reserved word table used for letter runs.
        """
        self._table = table

    @property
    def table(self) -> WordClassTable:
        return self._table

    def classify(self, source: str) -> list[Token]:
        """
        Split source text into classified tokens.

        Args:
            source: The program text.

        Returns:
            Tokens in source order covering the whole input.
        """
        tokens: list[Token] = []
        pos = 0
        length = len(source)

        while pos < length:
            match = _TOKEN_PATTERN.match(source, pos)
            if match is None:
                # No rule applies: single-character fallback keeps coverage total
                tokens.append(
                    Token(pos, pos + 1, TokenCategory.IDENTIFIER, source[pos])
                )
                pos += 1
                continue

            rule = match.lastgroup
            text = match.group()
            if rule == "word":
                category = self.classify_word(text)
            else:
                category = _RULE_CATEGORIES[rule]

            tokens.append(Token(pos, match.end(), category, text))
            pos = match.end()

        return tokens

    def classify_word(self, word: str) -> TokenCategory:
        """
        Classify a single letter run.

        Membership is exact and case-sensitive.

        Args:
            word: A run of ASCII letters.

        Returns:
            The word's category, ``identifier`` when it is not reserved.
        """
        table = self._table
        if word in table.keywords:
            return TokenCategory.KEYWORD
        if word in table.control_keywords:
            return TokenCategory.CONTROL_KEYWORD
        if word in table.functions:
            return TokenCategory.FUNCTION
        if word in table.operators:
            return TokenCategory.OPERATOR
        if word in BOOLEAN_LITERALS:
            return TokenCategory.BOOLEAN
        return TokenCategory.IDENTIFIER

    def classify_lines(self, source: str) -> list[list[Token]]:
        """
        Classify source text and group the tokens by line.

        Tokens spanning a newline (whitespace runs, unterminated strings) are
        cut at line boundaries; the newline characters themselves are dropped.

        Args:
            source: The program text.

        Returns:
            One token list per line of ``source.split("\\n")``.
        """
        lines: list[list[Token]] = [[]]
        for token in self.classify(source):
            offset = token.start
            pieces = token.text.split("\n")
            for index, piece in enumerate(pieces):
                if index > 0:
                    lines.append([])
                    offset += 1
                if piece:
                    lines[-1].append(
                        Token(offset, offset + len(piece), token.category, piece)
                    )
                offset += len(piece)
        return lines

    def suggestions(self) -> list[Suggestion]:
        """
        Return the completion candidates offered in every context.

        Keywords, then operator words, then function words; control keywords
        are not offered.
        """
        table = self._table
        groups = (
            (table.keywords, TokenCategory.KEYWORD),
            (table.operators, TokenCategory.OPERATOR),
            (table.functions, TokenCategory.FUNCTION),
        )
        return [
            Suggestion(word, category)
            for words, category in groups
            for word in sorted(words)
        ]

    def complete(self, text: str, cursor: int) -> tuple[int, list[Suggestion]]:
        """
        Return suggestions matching the word being typed at ``cursor``.

        Args:
            text: The full buffer text.
            cursor: Cursor offset into ``text``.

        Returns:
            A tuple of (length of the prefix to replace, matching suggestions).
        """
        cursor = max(0, min(cursor, len(text)))
        prefix = _WORD_PREFIX.search(text[:cursor]).group()
        matches = [s for s in self.suggestions() if s.label.startswith(prefix)]
        return len(prefix), matches
