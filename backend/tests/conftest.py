import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture
def books_path(tmp_path):
    return tmp_path / "db.json"


@pytest.fixture
def json_repo(books_path):
    from repositories import JsonBooksRepository

    repo = JsonBooksRepository(books_path)
    repo.init_store()
    return repo


@pytest.fixture
def client(json_repo, monkeypatch):
    from fastapi.testclient import TestClient

    from api.main import create_app

    for name in ("PORT", "BOOKS_STORE"):
        monkeypatch.delenv(name, raising=False)
    return TestClient(create_app(books_repo=json_repo))
