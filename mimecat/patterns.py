"""Pattern shape detection: exact name, suffix, wildcard with suffix, wildcard."""
from __future__ import annotations

from enum import Enum

from mimecat.wildcard import has_wildcard

SUFFIX_DELIMITER = "*."


class PatternKind(str, Enum):
    EXACT = "exact"
    SUFFIX = "suffix"
    WILDCARD_SUFFIX = "wildcard_suffix"
    WILDCARD = "wildcard"


def is_suffix_pattern(pattern: str) -> bool:
    """True for "*.ext" where "ext" holds no further wildcard characters."""
    if not pattern.startswith(SUFFIX_DELIMITER):
        return False
    return not has_wildcard(pattern[len(SUFFIX_DELIMITER):])


def is_wildcard_suffix_pattern(pattern: str) -> bool:
    """True for patterns like "lib*.a": other wildcards plus a literal tail after the last "*."."""
    parts = [p for p in pattern.split(SUFFIX_DELIMITER) if p]
    return len(parts) > 1 and not has_wildcard(parts[-1])


def wildcard_suffix(pattern: str) -> str:
    """Return the part of 'pattern' after the last "*.", or the whole pattern if there is none."""
    idx = pattern.rfind(SUFFIX_DELIMITER)
    if idx < 0:
        return pattern
    return pattern[idx + len(SUFFIX_DELIMITER):]


def classify_pattern(pattern: str) -> PatternKind:
    """
    Return the cheapest matcher kind able to handle 'pattern'.

    The checks run from cheapest to most expensive and the first one that
    fits wins. Nothing here raises; odd patterns end up as WILDCARD.
    """
    if not has_wildcard(pattern):
        return PatternKind.EXACT
    if is_suffix_pattern(pattern):
        return PatternKind.SUFFIX
    if is_wildcard_suffix_pattern(pattern):
        return PatternKind.WILDCARD_SUFFIX
    return PatternKind.WILDCARD


def normalize_suffix(pattern: str) -> str:
    """Strip a leading "*." or a lone leading "." from a suffix pattern."""
    if pattern.startswith(SUFFIX_DELIMITER):
        return pattern[len(SUFFIX_DELIMITER):]
    if pattern.startswith("."):
        return pattern[1:]
    return pattern
