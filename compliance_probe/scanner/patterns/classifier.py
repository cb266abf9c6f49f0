"""
Pattern Classifier

Interprets declarative category tables. A category is a named list of
regular expressions combined with OR (any pattern suffices) or AND (every
pattern must match somewhere in the text). Matching is case-insensitive.
Categories are evaluated in declaration order so results are reproducible.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import structlog

from compliance_probe.models.probe import ClassifiedItem

logger = structlog.get_logger()

PatternLike = Union[str, "re.Pattern[str]"]


class MatchMode(str, Enum):
    ANY = "OR"
    ALL = "AND"


def compile_patterns(patterns: Iterable[PatternLike]) -> Tuple["re.Pattern[str]", ...]:
    """Compile raw strings with IGNORECASE, keep precompiled patterns as-is"""
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, str):
            compiled.append(re.compile(pattern, re.IGNORECASE))
        else:
            compiled.append(pattern)
    return tuple(compiled)


@dataclass(frozen=True)
class Category:
    """One row of a pattern table"""
    name: str
    patterns: Tuple["re.Pattern[str]", ...]
    match: MatchMode = MatchMode.ANY
    weight: float = 0.0

    @classmethod
    def of(
        cls,
        name: str,
        patterns: Sequence[PatternLike],
        match: MatchMode = MatchMode.ANY,
        weight: float = 0.0
    ) -> "Category":
        return cls(name=name, patterns=compile_patterns(patterns), match=match, weight=weight)

    def matches(self, text: str) -> bool:
        if not text or not self.patterns:
            return False
        if self.match == MatchMode.ALL:
            return all(pattern.search(text) for pattern in self.patterns)
        return any(pattern.search(text) for pattern in self.patterns)


@dataclass
class Classification:
    """Found/missing split of a category table for one text"""
    found: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    items: List[ClassifiedItem] = field(default_factory=list)

    @property
    def found_weight(self) -> float:
        return sum(item.weight for item in self.items if item.matched)


class PatternClassifier:
    """Shared interpreter for every probe's pattern tables"""

    @staticmethod
    def classify(text: str, categories: Sequence[Category]) -> Classification:
        """
        Evaluate every category against a text

        Args:
            text: Anchor text, URL or document body chosen by the caller
            categories: Ordered category table

        Returns:
            Classification with found and missing category names in table order
        """
        result = Classification()
        for category in categories:
            matched = category.matches(text)
            result.items.append(
                ClassifiedItem(category=category.name, matched=matched, weight=category.weight)
            )
            if matched:
                result.found.append(category.name)
            else:
                result.missing.append(category.name)
        return result

    @staticmethod
    def matches_any(text: str, categories: Sequence[Category]) -> bool:
        """True when at least one category of the table matches"""
        return any(category.matches(text) for category in categories)

    @staticmethod
    def first_match(text: str, categories: Sequence[Category]) -> Optional[Category]:
        for category in categories:
            if category.matches(text):
                return category
        return None
