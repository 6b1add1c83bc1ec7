"""
HTTP tests for the /books routes.
"""
import json
import logging
from unittest.mock import patch

from fastapi.testclient import TestClient

from api.main import create_app
from domain.models import ID_ALPHABET, ID_LENGTH
from repositories import InMemoryBooksRepository


def _create(client, **fields):
    resp = client.post("/books", json=fields)
    assert resp.status_code == 201
    return resp.json()


def test_list_starts_empty(client):
    resp = client.get("/books")
    assert resp.status_code == 200
    assert resp.json() == []


def test_create_assigns_id(client):
    book = _create(client, title="Dune", author="Herbert")

    assert len(book["id"]) == ID_LENGTH
    assert all(ch in ID_ALPHABET for ch in book["id"])
    assert book == {"id": book["id"], "title": "Dune", "author": "Herbert"}


def test_create_ignores_client_id(client):
    book = _create(client, id="mine!", title="Dune", author="Herbert")
    assert book["id"] != "mine!"


def test_create_stores_extra_fields(client):
    book = _create(client, title="Dune", author="Herbert", year=1965, tags=["sf"])

    fetched = client.get(f"/books/{book['id']}").json()
    assert fetched["year"] == 1965
    assert fetched["tags"] == ["sf"]


def test_created_ids_are_unique(client):
    ids = {_create(client, title=f"Book {i}", author="A")["id"] for i in range(20)}
    assert len(ids) == 20


def test_get_after_create_returns_same_record(client):
    book = _create(client, title="Dune", author="Herbert")
    resp = client.get(f"/books/{book['id']}")
    assert resp.status_code == 200
    assert resp.json() == book


def test_list_returns_books_in_insertion_order(client):
    first = _create(client, title="A", author="X")
    second = _create(client, title="B", author="Y")
    assert client.get("/books").json() == [first, second]


def test_create_requires_title_and_author(client):
    assert client.post("/books", json={"title": "Dune"}).status_code == 422
    assert client.post("/books", json={"author": "Herbert"}).status_code == 422
    assert client.post("/books", json=["not", "an", "object"]).status_code == 422
    assert client.get("/books").json() == []


def test_put_changes_only_given_fields(client):
    book = _create(client, title="Dune", author="Herbert")

    resp = client.put(f"/books/{book['id']}", json={"author": "X"})

    assert resp.status_code == 200
    assert resp.json() == {"id": book["id"], "title": "Dune", "author": "X"}


def test_put_cannot_change_id(client):
    book = _create(client, title="Dune", author="Herbert")

    resp = client.put(f"/books/{book['id']}", json={"id": "other", "title": "T"})

    assert resp.json()["id"] == book["id"]
    assert client.get("/books/other").status_code == 404


def test_put_rejects_null_title(client):
    book = _create(client, title="Dune", author="Herbert")
    resp = client.put(f"/books/{book['id']}", json={"title": None})
    assert resp.status_code == 422


def test_unknown_id_is_404_everywhere(client):
    for resp in (
        client.get("/books/nope1"),
        client.put("/books/nope1", json={"title": "X"}),
        client.delete("/books/nope1"),
    ):
        assert resp.status_code == 404
        assert resp.content == b""


def test_delete_then_get_is_404(client):
    book = _create(client, title="Dune", author="Herbert")

    resp = client.delete(f"/books/{book['id']}")
    assert resp.status_code == 200
    assert resp.content == b""

    assert client.get(f"/books/{book['id']}").status_code == 404


def test_dune_scenario(client, books_path):
    created = client.post("/books", json={"title": "Dune", "author": "Herbert"})
    assert created.status_code == 201
    book_id = created.json()["id"]
    assert created.json() == {"id": book_id, "title": "Dune", "author": "Herbert"}

    updated = client.put(f"/books/{book_id}", json={"title": "Dune Messiah"})
    assert updated.status_code == 200
    assert updated.json() == {"id": book_id, "title": "Dune Messiah", "author": "Herbert"}
    assert json.loads(books_path.read_text())["books"] == [updated.json()]

    assert client.delete(f"/books/{book_id}").status_code == 200
    assert client.get(f"/books/{book_id}").status_code == 404
    assert json.loads(books_path.read_text()) == {"books": []}


def test_restart_keeps_books(json_repo, books_path):
    from repositories import JsonBooksRepository

    first = TestClient(create_app(books_repo=json_repo))
    _create(first, title="Dune", author="Herbert")
    listing = first.get("/books").json()

    second = TestClient(create_app(books_repo=JsonBooksRepository(books_path)))
    assert second.get("/books").json() == listing


def test_create_write_failure_is_500(client, json_repo):
    with patch.object(json_repo.storage, "write", side_effect=OSError("disk full")):
        resp = client.post("/books", json={"title": "Dune", "author": "Herbert"})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "disk full"}
    assert client.get("/books").json() == []


def test_update_write_failure_is_500(client, json_repo):
    book = _create(client, title="Dune", author="Herbert")

    with patch.object(json_repo.storage, "write", side_effect=OSError("read-only")):
        resp = client.put(f"/books/{book['id']}", json={"title": "Dune Messiah"})

    assert resp.status_code == 500
    assert "read-only" in resp.json()["detail"]
    assert client.get(f"/books/{book['id']}").json()["title"] == "Dune"


def test_cors_allows_any_origin(client):
    resp = client.get("/books", headers={"Origin": "http://example.com"})
    assert resp.headers["access-control-allow-origin"] == "*"

    preflight = client.options(
        "/books",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "DELETE"},
    )
    assert preflight.status_code == 200
    assert preflight.headers["access-control-allow-origin"] == "*"


def test_requests_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="api.access"):
        client.get("/books/nope1")

    records = [r for r in caplog.records if r.name == "api.access"]
    assert len(records) == 1
    message = records[0].getMessage()
    assert message.startswith("GET /books/nope1 404 ")
    assert message.endswith(" ms")


def test_api_docs_served(client):
    resp = client.get("/api-docs")
    assert resp.status_code == 200
    assert "swagger" in resp.text.lower()


def test_openapi_schema_describes_routes(client):
    schema = client.get("/openapi.json").json()

    assert schema["info"]["title"] == "Book API"
    assert schema["servers"] == [{"url": "http://localhost:4000"}]
    paths = schema["paths"]
    assert set(paths["/books"]) == {"get", "post"}
    assert set(paths["/books/{book_id}"]) == {"get", "put", "delete"}
    assert "404" in paths["/books/{book_id}"]["delete"]["responses"]
    assert "500" in paths["/books"]["post"]["responses"]
    assert paths["/books"]["post"]["summary"] == "Create a new book"
    assert set(schema["components"]["schemas"]["BookCreate"]["required"]) == {"title", "author"}


def test_in_memory_store_serves_requests():
    client = TestClient(create_app(books_repo=InMemoryBooksRepository()))
    book = _create(client, title="Dune", author="Herbert")
    assert client.get("/books").json() == [book]


def test_delete_write_failure_is_500(client, json_repo):
    book = _create(client, title="Dune", author="Herbert")

    with patch.object(json_repo.storage, "write", side_effect=OSError("disk full")):
        resp = client.delete(f"/books/{book['id']}")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "disk full"}
    assert client.get(f"/books/{book['id']}").status_code == 200


def test_failed_request_is_still_logged(json_repo, caplog):
    client = TestClient(create_app(books_repo=json_repo), raise_server_exceptions=False)

    with patch.object(json_repo.storage, "read", side_effect=OSError("boom")):
        with caplog.at_level(logging.INFO, logger="api.access"):
            resp = client.get("/books")

    assert resp.status_code == 500
    records = [r for r in caplog.records if r.name == "api.access"]
    assert len(records) == 1
    assert records[0].getMessage().startswith("GET /books 500 ")


def test_hand_edited_records_are_returned_verbatim(client, books_path):
    books_path.write_text(json.dumps({
        "books": [
            {"id": "noTtl", "author": "Anonymous"},
            {"id": "nuLLt", "title": None, "author": "Herbert"},
        ]
    }))

    listing = client.get("/books").json()
    assert listing[0] == {"id": "noTtl", "author": "Anonymous"}
    assert "title" not in client.get("/books/noTtl").json()

    resp = client.put("/books/nuLLt", json={"author": "Frank Herbert"})
    assert resp.json() == {"id": "nuLLt", "title": None, "author": "Frank Herbert"}

    stored = json.loads(books_path.read_text())["books"]
    assert stored[0] == {"id": "noTtl", "author": "Anonymous"}
    assert stored[1] == {"id": "nuLLt", "title": None, "author": "Frank Herbert"}
