"""
Reserved word tables for the Leaf language.

The classifier receives a WordClassTable at construction time instead of
reading module-level lists, so a vocabulary change is a new value rather than
a mutation of shared state.
"""

from dataclasses import dataclass, field
from typing import Iterable


def _freeze(words: Iterable[str]) -> frozenset[str]:
    return frozenset(words)


@dataclass(frozen=True)
class WordClassTable:
    """
    Four disjoint sets of reserved words.

    Attributes:
        keywords: Declaration keywords (``set``, ``change``).
        control_keywords: Control-flow keywords (``if``, ``for``, ...).
        operators: Operator words (``plus``, ``minus``, ...).
        functions: Built-in function words (``print``, ``ask``).
    """

    keywords: frozenset[str] = field(default_factory=frozenset)
    control_keywords: frozenset[str] = field(default_factory=frozenset)
    operators: frozenset[str] = field(default_factory=frozenset)
    functions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of words but always store frozensets
        for name in ("keywords", "control_keywords", "operators", "functions"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

        groups = self.groups()
        seen: dict[str, str] = {}
        for group_name, words in groups.items():
            for word in words:
                if word in seen:
                    raise ValueError(
                        f"Word '{word}' appears in both {seen[word]} and {group_name}"
                    )
                seen[word] = group_name

    def groups(self) -> dict[str, frozenset[str]]:
        """Return the four word sets keyed by field name."""
        return {
            "keywords": self.keywords,
            "control_keywords": self.control_keywords,
            "operators": self.operators,
            "functions": self.functions,
        }

    def __contains__(self, word: object) -> bool:
        return any(word in words for words in self.groups().values())


# Ordered tuples keep suggestion lists stable; the table itself stores sets.
LEAF_KEYWORDS = ("set", "change")
LEAF_CONTROL_KEYWORDS = ("if", "else", "to", "task", "from", "by", "for", "in")
LEAF_OPERATORS = ("plus", "minus", "times", "divide", "modulo")
LEAF_FUNCTIONS = ("print", "ask")

LEAF_VOCABULARY = WordClassTable(
    keywords=LEAF_KEYWORDS,
    control_keywords=LEAF_CONTROL_KEYWORDS,
    operators=LEAF_OPERATORS,
    functions=LEAF_FUNCTIONS,
)
