"""Tests for the classify, categories and server subcommands."""
import os
from argparse import Namespace
from unittest.mock import patch

import pytest
import requests

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

import mimecat.config as config_mod
from mimecat.categorizer import MimeCategorizer
from mimecat.category import MimeCategory
from mimecat.commands.categories import cmd_categories
from mimecat.commands.classify import cmd_classify
from mimecat.commands.server import cmd_server
from mimecat.settings import MemoryCategoryStore, TomlCategoryStore


def make(name, insensitive="", sensitive="", color="white"):
    c = MimeCategory(name, color)
    c.add_patterns(insensitive, case_sensitive=False)
    c.add_patterns(sensitive, case_sensitive=True)
    return c


@pytest.fixture
def categorizer():
    c = MimeCategorizer(MemoryCategoryStore([
        make("video", insensitive="*.mp4", color="#aa00ff"),
        make("object file", insensitive="lib*.a"),
    ]))
    with patch("mimecat.commands.classify.get_categorizer", return_value=c), \
            patch("mimecat.commands.categories.get_categorizer", return_value=c):
        yield c


def classify_args(*names, verbose=False, remote=False):
    return Namespace(names=list(names), verbose=verbose, remote=remote)


class TestClassifyLocal:
    def test_category_per_name(self, categorizer, capsys):
        cmd_classify(classify_args("/no/such/dir/Movie.MP4", "notes.txt"))
        out = capsys.readouterr().out.splitlines()
        assert out == ["video\t/no/such/dir/Movie.MP4", "-\tnotes.txt"]

    def test_verbose_shows_pattern_and_suffix(self, categorizer, capsys):
        cmd_classify(classify_args("clip.mp4", "LibFoo.a", verbose=True))
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "video\tclip.mp4\t*.mp4\tsuffix=mp4"
        assert out[1] == "object file\tLibFoo.a\tlib*.a (case-insensitive)\tsuffix=a"

    def test_existing_symlink_uses_mode(self, categorizer, capsys, tmp_path):
        link = tmp_path / "movie.mp4"
        link.symlink_to(tmp_path / "elsewhere")
        cmd_classify(classify_args(str(link)))
        assert capsys.readouterr().out == f"symlink\t{link}\n"

    def test_existing_executable_uses_mode(self, categorizer, capsys, tmp_path):
        script = tmp_path / "run-me"
        script.write_text("#!/bin/sh\n")
        script.chmod(0o755)
        cmd_classify(classify_args(str(script)))
        assert capsys.readouterr().out == f"executable\t{script}\n"


    def test_existing_directory_has_no_category(self, categorizer, capsys, tmp_path):
        folder = tmp_path / "holiday.mp4"
        folder.mkdir()
        cmd_classify(classify_args(str(folder)))
        assert capsys.readouterr().out == f"-\t{folder}\n"


class TestClassifyRemote:
    def test_prints_server_results(self, capsys):
        results = [
            {"name": "clip.mp4", "category": "video", "pattern": "*.mp4", "suffix": "mp4"},
            {"name": "x.bin", "category": None},
        ]
        with patch("mimecat.commands.classify.client.post", return_value=results) as post:
            cmd_classify(classify_args("/tmp/clip.mp4", "x.bin", remote=True))
        post.assert_called_once_with("/classify", {"names": ["clip.mp4", "x.bin"]})
        assert capsys.readouterr().out.splitlines() == ["video\tclip.mp4", "-\tx.bin"]

    def test_unreachable_server(self, capsys):
        with patch("mimecat.commands.classify.client.post",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(SystemExit) as exc:
                cmd_classify(classify_args("clip.mp4", remote=True))
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "cannot reach server" in err
        assert "MIMECAT_SERVER" in err


class TestCategories:
    def test_lists_names_and_colors(self, categorizer, capsys):
        cmd_categories(Namespace(patterns=False, remote=False, push=False))
        out = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in out] == ["video", "object", "executable", "symlink"]
        assert out[0].endswith("#aa00ff")

    def test_patterns(self, categorizer, capsys):
        cmd_categories(Namespace(patterns=True, remote=False, push=False))
        out = capsys.readouterr().out
        assert "    case-insensitive: *.mp4\n" in out
        assert "    case-sensitive:   lft.db, traceproto.db, traceroute.db, *.jsa, *.ucode\n" in out
        assert "Categories file:" in out

    def test_remote(self, capsys):
        entries = [{
            "name": "video",
            "color": "red",
            "patterns_case_insensitive": ["*.mp4"],
            "patterns_case_sensitive": [],
        }]
        with patch("mimecat.commands.categories.client.get", return_value=entries) as get:
            cmd_categories(Namespace(patterns=True, remote=True, push=False))
        get.assert_called_once_with("/categories")
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "video  red"
        assert "Categories file:" not in out

    def test_push(self, categorizer, capsys):
        with patch("mimecat.commands.categories.client.put", side_effect=lambda path, data: data) as put:
            cmd_categories(Namespace(patterns=False, remote=False, push=True))
        path, data = put.call_args.args
        assert path == "/categories"
        assert [e["name"] for e in data] == ["video", "object file", "executable", "symlink"]
        assert data[0]["patterns_case_insensitive"] == ["*.mp4"]
        assert capsys.readouterr().out == "Pushed 4 categories to the server\n"


class TestServer:
    @pytest.fixture(autouse=True)
    def isolated_env(self, tmp_path):
        env = {"MIMECAT_CONFIG_PATH": str(tmp_path / "mimecat.config")}
        with patch.dict(os.environ, env), \
                patch.object(config_mod, "_config", None), \
                patch("uvicorn.run") as run:
            self.run = run
            yield

    def server_args(self, categories=None):
        return Namespace(host="0.0.0.0", port=9000, reload=False, categories=categories)

    def test_categories_path_exported_for_the_app(self, tmp_path, capsys):
        path = tmp_path / "cats.toml"
        TomlCategoryStore(path).save([make("video", insensitive="*.mp4")])
        cmd_server(self.server_args(str(path)))
        assert os.environ["MIMECAT_CATEGORIES_PATH"] == str(path)
        self.run.assert_called_once_with("server.main:app", host="0.0.0.0", port=9000, reload=False)
        assert f"Serving 1 categories from {path}" in capsys.readouterr().out

    def test_missing_file_announces_defaults(self, tmp_path, capsys):
        cmd_server(self.server_args(str(tmp_path / "new.toml")))
        assert "built-in set will be installed" in capsys.readouterr().out
        self.run.assert_called_once()

    def test_malformed_file_fails_before_starting(self, tmp_path):
        path = tmp_path / "cats.toml"
        path.write_text("[[category]\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            cmd_server(self.server_args(str(path)))
        self.run.assert_not_called()
