import sys
import os
import itertools

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT_DIR)

import pytest
from fastapi.testclient import TestClient

from bookstore.catalog.covers import CoverStore
from bookstore.catalog.service import BookService
from bookstore.catalog.sql_store import SqlBookStore
from bookstore.catalog.store import JsonBookStore
from bookstore.main import create_app


class FakeClock:
    """Whole-second clock that ticks on every call.

    Cover names embed the upload time in milliseconds; a real clock can
    hand out the same millisecond twice within one test.
    """

    def __init__(self, start: int = 1_700_000_000):
        self._ticks = itertools.count(start)

    def __call__(self) -> float:
        return float(next(self._ticks))


@pytest.fixture
def image_dirs(tmp_path):
    return [tmp_path / "static" / "image", tmp_path / "target" / "image"]


@pytest.fixture
def covers(image_dirs):
    return CoverStore(image_dirs, clock=FakeClock())


@pytest.fixture
def json_store(tmp_path):
    return JsonBookStore(tmp_path / "data" / "books.json")


@pytest.fixture
def sql_store(tmp_path):
    store = SqlBookStore(f"sqlite:///{tmp_path / 'books.db'}")
    yield store
    store.close()


@pytest.fixture(params=["json", "sql"])
def store(request):
    """Each test using this fixture runs once per storage strategy."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def service(store, covers):
    return BookService(store, covers)


@pytest.fixture
def client(service):
    return TestClient(create_app(service=service))
