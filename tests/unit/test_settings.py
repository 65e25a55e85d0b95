"""Unit tests for mimecat.settings: category persistence."""
import logging

import pytest

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from mimecat.category import MimeCategory
from mimecat.settings import (
    MemoryCategoryStore,
    TomlCategoryStore,
    category_from_dict,
    category_to_dict,
)


def make(name, insensitive="", sensitive="", color="white"):
    c = MimeCategory(name, color)
    c.add_patterns(insensitive, case_sensitive=False)
    c.add_patterns(sensitive, case_sensitive=True)
    return c


class TestDictConversion:
    def test_to_dict(self):
        c = make("object file", insensitive="lib*.a", sensitive="*.o, built-in.a", color="#ff8811")
        assert category_to_dict(c) == {
            "name": "object file",
            "color": "#ff8811",
            "patterns_case_insensitive": ["lib*.a"],
            "patterns_case_sensitive": ["built-in.a", "*.o"],
        }

    def test_from_dict_defaults(self):
        c = category_from_dict({"name": "video"})
        assert c.name == "video"
        assert c.color == "white"
        assert c.is_empty()

    def test_from_dict_accepts_comma_string(self):
        c = category_from_dict({"name": "video", "patterns_case_insensitive": "*.mp4, *.mkv"})
        assert c.patterns(case_sensitive=False) == ["*.mkv", "*.mp4"]


class TestMemoryStore:
    def test_empty(self):
        assert MemoryCategoryStore().load() == []

    def test_load_returns_fresh_objects(self):
        original = make("video", insensitive="*.mp4")
        store = MemoryCategoryStore([original])
        first = store.load()
        second = store.load()
        assert first[0] is not original
        assert first[0] is not second[0]
        assert first[0].patterns(case_sensitive=False) == ["*.mp4"]

    def test_later_edits_to_caller_objects_not_stored(self):
        original = make("video", insensitive="*.mp4")
        store = MemoryCategoryStore([original])
        original.add_patterns("*.mkv", case_sensitive=False)
        assert store.load()[0].patterns(case_sensitive=False) == ["*.mp4"]
        saved = [make("audio")]
        store.save(saved)
        saved[0].name = "renamed"
        assert [c.name for c in store.load()] == ["audio"]

    def test_save_replaces_and_counts(self):
        store = MemoryCategoryStore([make("video")])
        store.save([make("audio"), make("image")])
        assert [c.name for c in store.load()] == ["audio", "image"]
        assert store.save_count == 1


class TestTomlStore:
    def test_missing_file_loads_nothing(self, tmp_path):
        assert TomlCategoryStore(tmp_path / "missing").load() == []

    def test_round_trip_keeps_order_and_patterns(self, tmp_path):
        store = TomlCategoryStore(tmp_path / "categories.toml")
        store.save([
            make("video", insensitive="*.mp4, *.mkv", color="#aa00ff"),
            make("junk", insensitive="*.bak", sensitive="core, *~"),
        ])
        loaded = store.load()
        assert [c.name for c in loaded] == ["video", "junk"]
        assert loaded[0].color == "#aa00ff"
        assert loaded[0].patterns(case_sensitive=False) == ["*.mkv", "*.mp4"]
        assert loaded[1].patterns(case_sensitive=True) == ["core", "*~"]

    def test_special_characters_survive(self, tmp_path):
        store = TomlCategoryStore(tmp_path / "categories.toml")
        store.save([make('quote "me"', sensitive="back\\slash, ümlaut.txt")])
        (loaded,) = store.load()
        assert loaded.name == 'quote "me"'
        assert loaded.patterns(case_sensitive=True) == ["back\\slash", "ümlaut.txt"]

    def test_save_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "categories.toml"
        TomlCategoryStore(path).save([make("video")])
        assert path.exists()

    def test_written_format(self, tmp_path):
        path = tmp_path / "categories.toml"
        TomlCategoryStore(path).save([make("video", insensitive="*.mp4")])
        data = tomllib.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "category": [{
                "name": "video",
                "color": "white",
                "patterns_case_insensitive": ["*.mp4"],
                "patterns_case_sensitive": [],
            }]
        }

    def test_reads_hand_written_file(self, tmp_path):
        path = tmp_path / "categories.toml"
        path.write_text(
            '[[category]]\n'
            'name = "video"\n'
            'patterns_case_insensitive = ["*.MP4", " *.mkv "]\n'
        )
        (video,) = TomlCategoryStore(path).load()
        assert video.color == "white"
        assert video.patterns(case_sensitive=False) == ["*.mkv", "*.MP4"]
        assert video.patterns(case_sensitive=True) == []

    def test_nameless_entry_skipped(self, tmp_path, caplog):
        path = tmp_path / "categories.toml"
        path.write_text(
            '[[category]]\n'
            'color = "red"\n'
            '\n'
            '[[category]]\n'
            'name = "video"\n'
        )
        with caplog.at_level(logging.WARNING, logger="mimecat.settings"):
            loaded = TomlCategoryStore(path).load()
        assert [c.name for c in loaded] == ["video"]
        assert "category #1 has no name" in caplog.text

    def test_malformed_file_raises(self, tmp_path):
        path = tmp_path / "categories.toml"
        path.write_text("[[category]\nname = ")
        with pytest.raises(tomllib.TOMLDecodeError):
            TomlCategoryStore(path).load()
        assert path.read_text() == "[[category]\nname = "
