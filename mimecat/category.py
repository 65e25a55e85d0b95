"""MimeCategory: a named set of filename patterns."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Union

from mimecat.patterns import PatternKind, classify_pattern, normalize_suffix


def split_patterns(raw: str) -> list[str]:
    """Split a comma-separated pattern string into trimmed, non-empty patterns."""
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass
class PatternLists:
    """The four pattern lists of one case sensitivity."""

    exact: list[str] = field(default_factory=list)
    suffix: list[str] = field(default_factory=list)
    wildcard_suffix: list[str] = field(default_factory=list)
    wildcard: list[str] = field(default_factory=list)

    def list_for(self, kind: PatternKind) -> list[str]:
        if kind is PatternKind.EXACT:
            return self.exact
        if kind is PatternKind.SUFFIX:
            return self.suffix
        if kind is PatternKind.WILDCARD_SUFFIX:
            return self.wildcard_suffix
        return self.wildcard

    def __len__(self) -> int:
        return len(self.exact) + len(self.suffix) + len(self.wildcard_suffix) + len(self.wildcard)


@dataclass(eq=False)
class MimeCategory:
    """
    A category such as "video" or "source file" and the patterns that select it.

    Patterns are split by shape (see mimecat.patterns) and by case
    sensitivity into eight lists. Suffixes are stored without their "*."
    prefix; everything else is stored trimmed but otherwise as given.
    Categories compare by identity: two categories with the same name are
    still different categories.
    """

    name: str
    color: str = "white"
    case_sensitive: PatternLists = field(default_factory=PatternLists)
    case_insensitive: PatternLists = field(default_factory=PatternLists)

    def lists(self, case_sensitive: bool) -> PatternLists:
        return self.case_sensitive if case_sensitive else self.case_insensitive

    def add_pattern(self, raw: str, case_sensitive: bool) -> None:
        pattern = raw.strip()
        if not pattern:
            return

        kind = classify_pattern(pattern)
        if kind is PatternKind.SUFFIX:
            pattern = normalize_suffix(pattern)
            if not pattern:
                return

        target = self.lists(case_sensitive).list_for(kind)
        if pattern not in target:
            target.append(pattern)

    def add_patterns(self, patterns: Union[str, Iterable[str]], case_sensitive: bool) -> None:
        """Add every non-empty pattern; a plain string is split on commas first."""
        if isinstance(patterns, str):
            patterns = split_patterns(patterns)
        for raw in patterns:
            if raw.strip():
                self.add_pattern(raw, case_sensitive)

    def patterns(self, case_sensitive: bool) -> list[str]:
        """
        Return the patterns of one case sensitivity in a stable, human-readable order:
        exact names, wildcards with suffix, "*.suffix" patterns, other wildcards.
        Each group is sorted on its own.
        """
        lists = self.lists(case_sensitive)
        key = None if case_sensitive else str.lower
        result = sorted(lists.exact, key=key)
        result += sorted(lists.wildcard_suffix, key=key)
        result += ["*." + s for s in sorted(lists.suffix, key=key)]
        result += sorted(lists.wildcard, key=key)
        return result

    def is_empty(self) -> bool:
        return not self.case_sensitive and not self.case_insensitive

    def copy(self) -> MimeCategory:
        """Return an independent category with the same name, color and patterns."""
        other = MimeCategory(self.name, self.color)
        other.add_patterns(self.patterns(case_sensitive=False), case_sensitive=False)
        other.add_patterns(self.patterns(case_sensitive=True), case_sensitive=True)
        return other

    def __repr__(self) -> str:
        return f"<MimeCategory {self.name!r}>"
