"""
MimeCategorizer: map filenames to MimeCategories.

Called once for every file of a filesystem scan (easily several hundred
thousand names), so the lookup goes from cheapest to most expensive and
stops at the first hit:

  1. exact filename, only tried for lengths some exact pattern has
  2. filename suffixes, longest first ("tar.bz2" before "bz2"); a suffix
     may be guarded by a wildcard such as "lib*.a" that must also match
  3. the remaining wildcards, one by one

Readers never lock. All lookup state lives in one immutable snapshot that
is replaced as a whole; writers serialize on a lock and publish the new
snapshot only once it is complete.
"""
from __future__ import annotations

import logging
import stat
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from mimecat.category import MimeCategory
from mimecat.config import get_categories_path
from mimecat.defaults import EXECUTABLE, SYMLINK, default_categories, mandatory_category
from mimecat.index import CategoryIndex, SuffixRule, build_index
from mimecat.settings import CategoryStore, MemoryCategoryStore, TomlCategoryStore

logger = logging.getLogger("mimecat.categorizer")

UNCATEGORIZED_COLOR = "white"


@dataclass(frozen=True)
class CategoryMatch:
    """
    A classification result.

    suffix: the filename suffix that selected the category ("" unless the
        suffix tier matched).
    pattern: the rule that matched, in the form a user would write it.
    case_insensitive: the match came from a case-insensitive wildcard.
    """

    category: MimeCategory
    pattern: str = ""
    suffix: str = ""
    case_insensitive: bool = False


@dataclass(frozen=True)
class _Snapshot:
    categories: tuple[MimeCategory, ...]
    index: CategoryIndex
    executable: Optional[MimeCategory]
    symlink: Optional[MimeCategory]


_EMPTY = _Snapshot((), CategoryIndex(), None, None)


def _match_suffix(
    suffixes: dict[str, tuple[SuffixRule, ...]], filename: str, suffix: str
) -> Optional[SuffixRule]:
    for rule in suffixes.get(suffix, ()):
        if rule.wildcard is None or rule.wildcard.matches(filename):
            return rule
    return None


def lookup(index: CategoryIndex, filename: str) -> Optional[CategoryMatch]:
    """Classify 'filename' against 'index'. Never raises; returns None for no match."""
    if not filename:
        return None

    length = len(filename)
    sensitive = index.sensitive
    insensitive = index.insensitive

    if sensitive.has_length(length):
        category = sensitive.exact.get(filename)
        if category is not None:
            return CategoryMatch(category, filename)

    # Lower-case names were already covered: the case-sensitive table holds
    # lower-cased copies of every case-insensitive name. The length bit is
    # checked on the lower-cased name since lower() may change the length
    # ("\u0130" becomes two code points).
    if insensitive.lengths:
        lower = filename.lower()
        if lower != filename and insensitive.has_length(len(lower)):
            category = insensitive.exact.get(lower)
            if category is not None:
                return CategoryMatch(category, filename)

    # Longest suffix first; a leading dot (hidden file) does not start a suffix
    dot = filename.find(".", 1)
    while dot >= 0:
        suffix = filename[dot + 1:]
        if suffix:
            rule = _match_suffix(sensitive.suffixes, filename, suffix)
            if rule is None and len(suffix) > 1:
                lower = suffix.lower()
                if lower != suffix and suffix.upper() != suffix:
                    rule = _match_suffix(insensitive.suffixes, filename, lower)
            if rule is not None:
                if rule.wildcard is None:
                    return CategoryMatch(rule.category, "*." + suffix, suffix)
                return CategoryMatch(
                    rule.category, rule.wildcard.pattern, suffix, rule.wildcard.case_insensitive
                )
        dot = filename.find(".", dot + 1)

    for rule in index.wildcards:
        if rule.wildcard.matches(filename):
            return CategoryMatch(rule.category, rule.wildcard.pattern, "", rule.wildcard.case_insensitive)

    return None


def _find(categories: Iterable[MimeCategory], name: str) -> Optional[MimeCategory]:
    for category in categories:
        if category.name == name:
            return category
    return None


class MimeCategorizer:
    """
    Classifies filenames against an ordered list of categories.

    Categories come from 'store' (in-memory by default). Construct one per
    composition root; get_categorizer() provides the process-wide instance
    used by the CLI and the server.
    """

    def __init__(self, store: Optional[CategoryStore] = None, load: bool = True) -> None:
        self.store: CategoryStore = store if store is not None else MemoryCategoryStore()
        self._snapshot = _EMPTY
        self._write_lock = threading.Lock()
        self._listeners: list[Callable[[], None]] = []
        if load:
            self.load()

    # -- reading ------------------------------------------------------------

    @property
    def categories(self) -> tuple[MimeCategory, ...]:
        return self._snapshot.categories

    @property
    def executable_category(self) -> Optional[MimeCategory]:
        return self._snapshot.executable

    @property
    def symlink_category(self) -> Optional[MimeCategory]:
        return self._snapshot.symlink

    def find_category_by_name(self, name: str) -> Optional[MimeCategory]:
        return _find(self._snapshot.categories, name)

    def match(self, filename: str) -> Optional[CategoryMatch]:
        return lookup(self._snapshot.index, filename)

    def classify(self, filename: str) -> Optional[MimeCategory]:
        """Return the category for 'filename', or None if no pattern matches."""
        result = lookup(self._snapshot.index, filename)
        return result.category if result else None

    def classify_with_suffix(self, filename: str) -> tuple[Optional[MimeCategory], str]:
        """Like classify(), also returning the suffix that matched ("" if none did)."""
        result = lookup(self._snapshot.index, filename)
        if result is None:
            return None, ""
        return result.category, result.suffix

    def match_entry(self, name: str, mode: int) -> Optional[CategoryMatch]:
        """
        Classify a directory entry given its st_mode.

        Symlinks always belong to the symlink category. Regular files are
        classified by name, and an unmatched one that its owner may execute
        falls back to the executable category. Directories, devices, FIFOs
        and sockets have no category.
        """
        snapshot = self._snapshot
        if stat.S_ISLNK(mode):
            return CategoryMatch(snapshot.symlink) if snapshot.symlink else None
        if not stat.S_ISREG(mode):
            return None

        result = lookup(snapshot.index, name)
        if result is not None:
            return result

        if mode & stat.S_IXUSR and snapshot.executable:
            return CategoryMatch(snapshot.executable)
        return None

    def category_for(self, name: str, mode: int) -> Optional[MimeCategory]:
        result = self.match_entry(name, mode)
        return result.category if result else None

    def name_for(self, name: str, mode: int) -> str:
        category = self.category_for(name, mode)
        return category.name if category else ""

    def color_for(self, name: str, mode: int) -> str:
        category = self.category_for(name, mode)
        return category.color if category else UNCATEGORIZED_COLOR

    # -- writing ------------------------------------------------------------

    def load(self) -> None:
        """(Re)read the categories from the store and rebuild the index."""
        with self._write_lock:
            self._snapshot = self._read_store()

    def replace_categories(self, categories: Iterable[MimeCategory]) -> None:
        """
        Save 'categories' to the store and switch to them.

        Listeners are notified after the write lock is released, so they
        may classify (or even replace categories) again.
        """
        with self._write_lock:
            self.store.save(list(categories))
            self._snapshot = self._read_store()
        self._notify()

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()

    def _read_store(self) -> _Snapshot:
        categories = self.store.load()
        if not categories:
            logger.info("No categories configured, installing defaults")
            categories = default_categories()
            self.store.save(categories)

        executable = self._ensure(categories, EXECUTABLE)
        symlink = self._ensure(categories, SYMLINK)

        return _Snapshot(tuple(categories), build_index(categories), executable, symlink)

    def _ensure(self, categories: list[MimeCategory], name: str) -> MimeCategory:
        category = _find(categories, name)
        if category is None:
            category = mandatory_category(name)
            categories.append(category)
            self.store.save(categories)
        return category


# Module-level singleton, created on first use
_categorizer: MimeCategorizer | None = None
_categorizer_lock = threading.Lock()


def get_categorizer() -> MimeCategorizer:
    global _categorizer
    with _categorizer_lock:
        if _categorizer is None:
            _categorizer = MimeCategorizer(TomlCategoryStore(get_categories_path()))
        return _categorizer


def set_categorizer(categorizer: MimeCategorizer | None) -> None:
    global _categorizer
    with _categorizer_lock:
        _categorizer = categorizer
