import json

import pytest
from fastapi.testclient import TestClient

from bookshelf.config import Settings
from bookshelf.main import create_app
from bookshelf.storage import BookStore


@pytest.fixture
def books_file(tmp_path):
    return tmp_path / "books.json"


@pytest.fixture
def store(books_file):
    return BookStore(books_file)


@pytest.fixture
def make_client(books_file):
    """Start the app against ``books_file``, optionally pre-filled."""
    clients = []

    def _make(initial=None):
        if initial is not None:
            books_file.write_text(json.dumps(initial), encoding="utf-8")
        client = TestClient(create_app(Settings(books_file=books_file)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    """Client over the seed data (file absent at startup)."""
    return make_client()


@pytest.fixture
def empty_client(make_client):
    return make_client(initial=[])
