"""mimecat scan: walk a directory tree and summarize disk usage per category or suffix."""

from __future__ import annotations

import logging
import os
import queue
import re
import stat
import sys
import threading
from dataclasses import dataclass, field
from typing import Optional

from mimecat.categorizer import MimeCategorizer, get_categorizer
from mimecat.config import get_scan_workers

logger = logging.getLogger("mimecat.scan")

UNCATEGORIZED = ""
NO_SUFFIX = ""

_LETTER = re.compile(r"[a-zA-Z]")


@dataclass
class CategoryTotals:
    files: int = 0
    size_bytes: int = 0


@dataclass
class ScanResult:
    """
    totals: per category name ("" for uncategorized), every non-directory entry.
    suffixes: per (category name, suffix), regular files only. The suffix is
        the one that selected the category, or NO_SUFFIX when a non-suffix
        rule did. Uncategorized files are keyed by their lower-cased last
        suffix.
    """

    totals: dict[str, CategoryTotals]
    suffixes: dict[tuple[str, str], CategoryTotals] = field(default_factory=dict)
    errors: int = 0

    @property
    def files(self) -> int:
        return sum(t.files for t in self.totals.values())

    @property
    def size_bytes(self) -> int:
        return sum(t.size_bytes for t in self.totals.values())


def _human_size(n: Optional[int]) -> str:
    if n is None:
        return "0"
    for unit in ("B", "K", "M", "G", "T", "P"):
        if abs(n) < 1024:
            return f"{n:.1f}{unit}" if unit != "B" else f"{n}B"
        n /= 1024
    return f"{n:.1f}P"


def _add(totals: CategoryTotals, size: int) -> None:
    totals.files += 1
    totals.size_bytes += size


def _merge(target: CategoryTotals, other: CategoryTotals) -> None:
    target.files += other.files
    target.size_bytes += other.size_bytes


def _fallback_suffix(name: str) -> str:
    """
    The lower-cased last suffix of an uncategorized name ("gz", not "tar.gz").

    The longest suffix of a name the categorizer does not know is usually
    noise such as "eab7d88df-git.deb", so only the last one is used.
    """
    if "." not in name or name.startswith("."):
        return NO_SUFFIX
    return name.rsplit(".", 1)[1].lower()


def _is_cruft(suffix: str, files: int) -> bool:
    """True for uncategorized suffixes that are unlikely to be real file types."""
    if suffix == NO_SUFFIX:
        return False
    if " " in suffix:
        return True

    letters = len(_LETTER.findall(suffix))
    if letters == 0:
        return True
    length = len(suffix)
    if length == 3 and letters == 3:
        return False
    # Long suffixes and suffixes with few letters only count if common
    if length > 6 and files < length:
        return True
    return letters * 100.0 / length < 70.0 and files < length


def _merge_cruft(suffixes: dict[tuple[str, str], CategoryTotals]) -> None:
    """Fold cruft suffixes of uncategorized files into their NO_SUFFIX bucket."""
    cruft = [
        key for key, totals in suffixes.items()
        if key[0] == UNCATEGORIZED and _is_cruft(key[1], totals.files)
    ]
    if not cruft:
        return
    target = suffixes.setdefault((UNCATEGORIZED, NO_SUFFIX), CategoryTotals())
    for key in cruft:
        _merge(target, suffixes.pop(key))
    logger.debug("merged %d uncategorized suffixes into (no suffix)", len(cruft))


class _Walker:
    """
    Breadth-first directory walk shared by a pool of worker threads.

    Every worker pulls a directory off the queue, pushes its subdirectories
    back and classifies the other entries. Totals are kept per worker and
    merged at the end, so the only shared state is the queue.
    """

    def __init__(self, categorizer: MimeCategorizer, workers: int, one_filesystem: bool) -> None:
        self.categorizer = categorizer
        self.workers = max(1, workers)
        self.one_filesystem = one_filesystem
        self.root_dev: Optional[int] = None
        self._dirs: queue.Queue[Optional[str]] = queue.Queue()
        self._results: list[ScanResult] = []
        self._results_lock = threading.Lock()

    def _scan_dir(self, dirpath: str, result: ScanResult) -> None:
        try:
            with os.scandir(dirpath) as it:
                entries = list(it)
        except OSError as e:
            logger.debug("cannot read directory %s: %s", dirpath, e)
            result.errors += 1
            return

        for entry in entries:
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError as e:
                logger.debug("cannot stat %s: %s", entry.path, e)
                result.errors += 1
                continue

            if entry.is_dir(follow_symlinks=False):
                if self.one_filesystem and st.st_dev != self.root_dev:
                    continue
                self._dirs.put(entry.path)
                continue

            match = self.categorizer.match_entry(entry.name, st.st_mode)
            name = match.category.name if match else UNCATEGORIZED
            _add(result.totals.setdefault(name, CategoryTotals()), st.st_size)

            # Symlinks and special files have no meaningful suffix
            if not stat.S_ISREG(st.st_mode):
                continue
            suffix = match.suffix if match else _fallback_suffix(entry.name)
            _add(result.suffixes.setdefault((name, suffix), CategoryTotals()), st.st_size)

    def _work(self) -> None:
        result = ScanResult(totals={})
        while True:
            dirpath = self._dirs.get()
            try:
                if dirpath is None:
                    break
                self._scan_dir(dirpath, result)
            finally:
                self._dirs.task_done()
        with self._results_lock:
            self._results.append(result)

    def run(self, root: str) -> ScanResult:
        self.root_dev = os.stat(root).st_dev
        threads = [
            threading.Thread(target=self._work, name=f"scan-{i}", daemon=True)
            for i in range(self.workers)
        ]
        for t in threads:
            t.start()

        self._dirs.put(root)
        self._dirs.join()
        for _ in threads:
            self._dirs.put(None)
        for t in threads:
            t.join()

        merged = ScanResult(totals={})
        for result in self._results:
            merged.errors += result.errors
            for name, totals in result.totals.items():
                _merge(merged.totals.setdefault(name, CategoryTotals()), totals)
            for key, totals in result.suffixes.items():
                _merge(merged.suffixes.setdefault(key, CategoryTotals()), totals)
        _merge_cruft(merged.suffixes)
        return merged


def scan_tree(
    root: str,
    categorizer: MimeCategorizer,
    workers: int = 4,
    one_filesystem: bool = False,
) -> ScanResult:
    """
    Classify every non-directory entry below 'root' and total files and bytes
    per category, and per category and suffix for regular files.
    """
    return _Walker(categorizer, workers, one_filesystem).run(root)


def _size(n: int, human: bool) -> str:
    return _human_size(n) if human else str(n)


def _print_categories(result: ScanResult, human: bool) -> None:
    rows = sorted(result.totals.items(), key=lambda kv: kv[1].size_bytes, reverse=True)
    width = max((len(name or "(uncategorized)") for name, _ in rows), default=0)
    for name, totals in rows:
        print(f"{_size(totals.size_bytes, human):>12}  {totals.files:>9,}  "
              f"{name or '(uncategorized)':<{width}}")
    print(f"{_size(result.size_bytes, human):>12}  {result.files:>9,}  total")


def _suffix_label(category: str, suffix: str) -> str:
    if suffix != NO_SUFFIX:
        return "*." + suffix
    return "(no suffix)" if category == UNCATEGORIZED else "(other rules)"


def _print_suffixes(result: ScanResult, human: bool) -> None:
    rows = sorted(result.suffixes.items(), key=lambda kv: kv[1].size_bytes, reverse=True)
    width = max((len(_suffix_label(*key)) for key, _ in rows), default=0)
    for (category, suffix), totals in rows:
        print(f"{_size(totals.size_bytes, human):>12}  {totals.files:>9,}  "
              f"{_suffix_label(category, suffix):<{width}}  {category or '(uncategorized)'}")


def cmd_scan(args) -> None:
    root = os.path.realpath(os.path.expanduser(getattr(args, "path", ".") or "."))
    workers = getattr(args, "workers", None) or get_scan_workers()
    human = getattr(args, "human", False)
    by_suffix = getattr(args, "suffixes", False)

    if not os.path.isdir(root):
        print(f"mimecat: not a directory: {root}", file=sys.stderr)
        sys.exit(1)

    result = scan_tree(
        root,
        get_categorizer(),
        workers=workers,
        one_filesystem=getattr(args, "one_filesystem", False),
    )

    if by_suffix:
        _print_suffixes(result, human)
    else:
        _print_categories(result, human)
    if result.errors:
        print(f"mimecat: {result.errors} entries could not be read", file=sys.stderr)
