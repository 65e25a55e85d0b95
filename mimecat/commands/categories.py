"""mimecat categories: list the configured categories, or push them to a server."""
from __future__ import annotations

import sys

from mimecat import client
from mimecat.categorizer import get_categorizer
from mimecat.commands import print_config_hint
from mimecat.config import get_categories_path
from mimecat.settings import category_to_dict


def _print_categories(entries: list[dict], show_patterns: bool) -> None:
    width = max((len(e["name"]) for e in entries), default=0)
    for entry in entries:
        print(f"{entry['name']:<{width}}  {entry['color']}")
        if not show_patterns:
            continue
        if entry["patterns_case_insensitive"]:
            print(f"    case-insensitive: {', '.join(entry['patterns_case_insensitive'])}")
        if entry["patterns_case_sensitive"]:
            print(f"    case-sensitive:   {', '.join(entry['patterns_case_sensitive'])}")


def cmd_categories(args) -> None:
    show_patterns = getattr(args, "patterns", False)
    remote = getattr(args, "remote", False)
    push = getattr(args, "push", False)

    if remote or push:
        try:
            if push:
                local = [category_to_dict(c) for c in get_categorizer().categories]
                entries = client.put("/categories", local)
            else:
                entries = client.get("/categories")
        except Exception as e:
            print(f"mimecat: cannot reach server: {e}", file=sys.stderr)
            print_config_hint()
            sys.exit(1)
        if push:
            print(f"Pushed {len(entries)} categories to the server")
            return
        _print_categories(entries, show_patterns)
        return

    entries = [category_to_dict(c) for c in get_categorizer().categories]
    _print_categories(entries, show_patterns)
    if show_patterns:
        print()
        print(f"Categories file: {get_categories_path()}")
