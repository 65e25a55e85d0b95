"""mimecat classify: print the category of each given filename."""
from __future__ import annotations

import os
import sys
from typing import Optional

from mimecat import client
from mimecat.categorizer import CategoryMatch, get_categorizer
from mimecat.commands import print_config_hint


def _format_local(name: str, result: Optional[CategoryMatch], verbose: bool) -> str:
    if result is None:
        return f"-\t{name}"
    line = f"{result.category.name}\t{name}"
    if verbose:
        case = " (case-insensitive)" if result.case_insensitive else ""
        line += f"\t{result.pattern}{case}"
        if result.suffix:
            line += f"\tsuffix={result.suffix}"
    return line


def _format_remote(entry: dict, verbose: bool) -> str:
    name = entry["name"]
    if not entry.get("category"):
        return f"-\t{name}"
    line = f"{entry['category']}\t{name}"
    if verbose:
        case = " (case-insensitive)" if entry.get("case_insensitive") else ""
        line += f"\t{entry.get('pattern', '')}{case}"
        if entry.get("suffix"):
            line += f"\tsuffix={entry['suffix']}"
    return line


def _lstat_mode(name: str) -> Optional[int]:
    try:
        return os.lstat(name).st_mode
    except OSError:
        return None


def cmd_classify(args) -> None:
    names = getattr(args, "names", []) or []
    verbose = getattr(args, "verbose", False)

    if getattr(args, "remote", False):
        try:
            results = client.post("/classify", {"names": [os.path.basename(n) or n for n in names]})
        except Exception as e:
            print(f"mimecat: cannot reach server: {e}", file=sys.stderr)
            print_config_hint()
            sys.exit(1)
        for entry in results:
            print(_format_remote(entry, verbose))
        return

    categorizer = get_categorizer()
    for name in names:
        base = os.path.basename(name) or name
        mode = _lstat_mode(name)
        if mode is None:
            result = categorizer.match(base)
        else:
            result = categorizer.match_entry(base, mode)
        print(_format_local(name, result, verbose))
