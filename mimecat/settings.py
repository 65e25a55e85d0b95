"""Persistence of category definitions."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from mimecat.category import MimeCategory

logger = logging.getLogger("mimecat.settings")


class CategoryStore(Protocol):
    def load(self) -> list[MimeCategory]: ...

    def save(self, categories: Iterable[MimeCategory]) -> None: ...


def category_to_dict(category: MimeCategory) -> dict:
    return {
        "name": category.name,
        "color": category.color,
        "patterns_case_insensitive": category.patterns(case_sensitive=False),
        "patterns_case_sensitive": category.patterns(case_sensitive=True),
    }


def category_from_dict(entry: dict) -> MimeCategory:
    category = MimeCategory(str(entry["name"]), str(entry.get("color") or "white"))
    category.add_patterns(entry.get("patterns_case_insensitive") or [], case_sensitive=False)
    category.add_patterns(entry.get("patterns_case_sensitive") or [], case_sensitive=True)
    return category


class MemoryCategoryStore:
    """Keeps copies of category definitions in memory. Loading always returns fresh copies."""

    def __init__(self, categories: Iterable[MimeCategory] = ()) -> None:
        self._categories = [c.copy() for c in categories]
        self.save_count = 0

    def load(self) -> list[MimeCategory]:
        return [c.copy() for c in self._categories]

    def save(self, categories: Iterable[MimeCategory]) -> None:
        self._categories = [c.copy() for c in categories]
        self.save_count += 1


def _toml_str(value: str) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes
    return json.dumps(value, ensure_ascii=False)


def _toml_list(values: list[str]) -> str:
    return "[" + ", ".join(_toml_str(v) for v in values) + "]"


class TomlCategoryStore:
    """
    Category definitions in a TOML file, one [[category]] table per category:

        [[category]]
        name = "video"
        color = "#aa00ff"
        patterns_case_insensitive = ["*.mkv", "*.mp4"]
        patterns_case_sensitive = []

    A missing file loads as no categories. A malformed file raises
    tomllib.TOMLDecodeError rather than being silently replaced.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> list[MimeCategory]:
        if not self.path.exists():
            return []
        with open(self.path, "rb") as f:
            data = tomllib.load(f)

        categories = []
        for i, entry in enumerate(data.get("category", []), start=1):
            if not isinstance(entry, dict) or not entry.get("name"):
                logger.warning("%s: category #%d has no name, skipped", self.path, i)
                continue
            categories.append(category_from_dict(entry))
        return categories

    def save(self, categories: Iterable[MimeCategory]) -> None:
        lines = []
        for category in categories:
            entry = category_to_dict(category)
            lines.append("[[category]]")
            lines.append(f"name = {_toml_str(entry['name'])}")
            lines.append(f"color = {_toml_str(entry['color'])}")
            lines.append(f"patterns_case_insensitive = {_toml_list(entry['patterns_case_insensitive'])}")
            lines.append(f"patterns_case_sensitive = {_toml_list(entry['patterns_case_sensitive'])}")
            lines.append("")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("\n".join(lines).rstrip("\n") + "\n", encoding="utf-8")
