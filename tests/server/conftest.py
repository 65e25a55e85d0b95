"""
Fixtures and helpers shared by all server tests.

Each test gets a fresh categorizer backed by an in-memory store. The
autouse `fresh_categorizer` fixture installs it as the process-wide
instance before the FastAPI lifespan asks for it, so nothing touches
~/.mimecat.categories.
"""
import pytest
from fastapi.testclient import TestClient

from mimecat.categorizer import MimeCategorizer, set_categorizer
from mimecat.category import MimeCategory
from mimecat.settings import MemoryCategoryStore
from server.main import app


def make_category(name, insensitive="", sensitive="", color="white"):
    c = MimeCategory(name, color)
    c.add_patterns(insensitive, case_sensitive=False)
    c.add_patterns(sensitive, case_sensitive=True)
    return c


@pytest.fixture
def store():
    return MemoryCategoryStore([
        make_category("video", insensitive="*.mp4, *.mkv", color="#aa00ff"),
        make_category("object file", insensitive="lib*.a", sensitive="*.o"),
        make_category("junk", sensitive="core, *~", color="red"),
    ])


@pytest.fixture(autouse=True)
def fresh_categorizer(store):
    """Give every server test its own categorizer."""
    categorizer = MimeCategorizer(store)
    set_categorizer(categorizer)
    yield categorizer
    set_categorizer(None)


@pytest.fixture
def client():
    """FastAPI TestClient using the in-memory categorizer."""
    with TestClient(app) as c:
        yield c
