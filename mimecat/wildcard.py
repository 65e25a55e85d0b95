"""Shell-style wildcard matching against a whole filename."""
from __future__ import annotations

import fnmatch
import logging
import re
from typing import Callable, Optional

logger = logging.getLogger("mimecat.wildcard")


def has_wildcard(pattern: str) -> bool:
    """Return True if 'pattern' contains any of '*', '?' or '['."""
    return "*" in pattern or "?" in pattern or "[" in pattern


class Wildcard:
    """
    A glob pattern compiled once into an anchored regular expression.

    '*' and '?' also match '/' (patterns are only ever applied to a
    filename, never a path). A pattern that fails to compile is kept so it
    can still be displayed, but it never matches anything.
    """

    __slots__ = ("pattern", "case_insensitive", "_match")

    def __init__(self, pattern: str, case_insensitive: bool = False) -> None:
        self.pattern = pattern
        self.case_insensitive = case_insensitive
        self._match: Optional[Callable] = None
        flags = re.IGNORECASE if case_insensitive else 0
        try:
            self._match = re.compile(fnmatch.translate(pattern), flags).match
        except re.error as e:
            logger.warning("Invalid wildcard %r: %s", pattern, e)

    @property
    def is_valid(self) -> bool:
        return self._match is not None

    def matches(self, name: str) -> bool:
        return self._match is not None and self._match(name) is not None

    def __repr__(self) -> str:
        flag = ", case_insensitive=True" if self.case_insensitive else ""
        return f"Wildcard({self.pattern!r}{flag})"
