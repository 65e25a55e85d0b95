"""Lookup tables derived from a category list, rebuilt from scratch on every change."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from mimecat.category import MimeCategory
from mimecat.patterns import wildcard_suffix
from mimecat.wildcard import Wildcard

logger = logging.getLogger("mimecat.index")


@dataclass(frozen=True)
class SuffixRule:
    """
    One candidate for a suffix key. With no wildcard the suffix alone selects
    the category; otherwise the whole filename must also match the wildcard.
    """

    wildcard: Optional[Wildcard]
    category: MimeCategory


@dataclass(frozen=True)
class WildcardRule:
    wildcard: Wildcard
    category: MimeCategory


@dataclass
class CaseTable:
    """Exact-name and suffix lookups for one case sensitivity."""

    exact: dict[str, MimeCategory] = field(default_factory=dict)
    lengths: int = 0  # bit n is set if some key in 'exact' has length n
    suffixes: dict[str, tuple[SuffixRule, ...]] = field(default_factory=dict)

    def has_length(self, length: int) -> bool:
        return (self.lengths >> length) & 1 == 1


@dataclass
class CategoryIndex:
    """
    Everything classification needs, derived from one category list.

    'sensitive' is consulted first and also carries lower-cased copies of
    the case-insensitive exact names and both lower- and upper-cased copies
    of the case-insensitive suffixes, so the common cases never need a
    lower-cased copy of the filename. 'insensitive' is keyed by lower-cased
    strings only.
    """

    sensitive: CaseTable = field(default_factory=CaseTable)
    insensitive: CaseTable = field(default_factory=CaseTable)
    wildcards: tuple[WildcardRule, ...] = ()

    def table(self, case_sensitive: bool) -> CaseTable:
        return self.sensitive if case_sensitive else self.insensitive


class _SuffixRules:
    """Rules collected for one suffix key before they are frozen into a tuple."""

    __slots__ = ("guarded", "plain")

    def __init__(self) -> None:
        self.guarded: list[SuffixRule] = []
        self.plain: list[SuffixRule] = []

    def rules(self) -> tuple[SuffixRule, ...]:
        # A wildcard with a suffix is more specific than the plain suffix,
        # so all guarded rules are tried before any plain one.
        return tuple(self.guarded + self.plain)


class _IndexBuilder:
    def __init__(self) -> None:
        self.index = CategoryIndex()
        self._suffixes: dict[bool, dict[str, _SuffixRules]] = {True: {}, False: {}}
        self._wildcards: list[WildcardRule] = []

    # -- exact names --------------------------------------------------------

    def _add_exact(self, case_sensitive: bool, key: str, category: MimeCategory) -> None:
        table = self.index.table(case_sensitive)
        existing = table.exact.get(key)
        if existing is not None:
            if existing is not category:
                logger.warning(
                    "Duplicate exact pattern %r in %r and %r; keeping %r",
                    key, existing.name, category.name, existing.name,
                )
            return
        table.exact[key] = category
        table.lengths |= 1 << len(key)

    def add_exact_keys(self, category: MimeCategory) -> None:
        for key in category.case_sensitive.exact:
            self._add_exact(True, key, category)

        for key in category.case_insensitive.exact:
            lower = key.lower()
            self._add_exact(False, lower, category)
            # An already lower-case filename is then found by the first lookup
            self._add_exact(True, lower, category)

    # -- suffixes -----------------------------------------------------------

    def _add_suffix(
        self,
        case_sensitive: bool,
        suffix: str,
        category: MimeCategory,
        wildcard: Optional[Wildcard] = None,
    ) -> None:
        rules = self._suffixes[case_sensitive].setdefault(suffix, _SuffixRules())
        if wildcard is not None:
            rules.guarded.append(SuffixRule(wildcard, category))
            return

        if rules.plain:
            owner = rules.plain[0].category
            if owner is not category:
                logger.warning(
                    "Duplicate suffix *.%s in %r and %r; keeping %r",
                    suffix, owner.name, category.name, owner.name,
                )
            return
        rules.plain.append(SuffixRule(None, category))

    def add_suffix_keys(self, category: MimeCategory) -> None:
        for suffix in category.case_insensitive.suffix:
            lower = suffix.lower()
            upper = suffix.upper()
            self._add_suffix(False, lower, category)
            self._add_suffix(True, lower, category)
            if upper != lower:
                self._add_suffix(True, upper, category)

        for suffix in category.case_sensitive.suffix:
            self._add_suffix(True, suffix, category)

    def add_wildcard_suffix_keys(self, category: MimeCategory) -> None:
        for pattern in category.case_sensitive.wildcard_suffix:
            self._add_suffix(True, wildcard_suffix(pattern), category, Wildcard(pattern))

        for pattern in category.case_insensitive.wildcard_suffix:
            wildcard = Wildcard(pattern, case_insensitive=True)
            lower = wildcard_suffix(pattern).lower()
            # Lower-case key only: "LIBFOO.A" does not reach a case-insensitive "lib*.a"
            self._add_suffix(False, lower, category, wildcard)
            self._add_suffix(True, lower, category, wildcard)

    # -- plain wildcards ----------------------------------------------------

    def add_wildcards(self, category: MimeCategory) -> None:
        for pattern in category.case_sensitive.wildcard:
            self._wildcards.append(WildcardRule(Wildcard(pattern), category))
        for pattern in category.case_insensitive.wildcard:
            self._wildcards.append(WildcardRule(Wildcard(pattern, case_insensitive=True), category))

    def build(self) -> CategoryIndex:
        for case_sensitive, collected in self._suffixes.items():
            self.index.table(case_sensitive).suffixes = {
                suffix: rules.rules() for suffix, rules in collected.items()
            }
        self.index.wildcards = tuple(self._wildcards)
        return self.index


def build_index(categories: Iterable[MimeCategory]) -> CategoryIndex:
    """
    Build the lookup tables for 'categories'.

    Categories are processed in order and earlier categories win every tie.
    A key claimed by two categories is logged and the later claim dropped;
    it is never an error.
    """
    start = time.monotonic()
    builder = _IndexBuilder()
    for category in categories:
        if category.is_empty():
            continue
        builder.add_exact_keys(category)
        builder.add_suffix_keys(category)
        builder.add_wildcard_suffix_keys(category)
        builder.add_wildcards(category)
    index = builder.build()
    logger.debug(
        "Index built in %.1fms (%d plain wildcards)",
        (time.monotonic() - start) * 1000, len(index.wildcards),
    )
    return index
