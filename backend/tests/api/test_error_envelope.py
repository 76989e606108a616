"""Error Envelope — persistence failures and routing errors share one JSON shape.

Invariants:
    - PersistenceError from any repository call → 500 PERSISTENCE_ERROR
    - Driver details never reach the client
    - Unknown routes and wrong methods → {"error": <detail>} with their status
    - Unexpected exceptions → 500 INTERNAL_ERROR, logged with the request ids,
      X-Request-ID echoed
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from bookstore.api.routes.books import get_book_repository
from bookstore.core.errors import PersistenceError
from bookstore.main import app
from bookstore.models.book import Book
from tests.api.books_data import DESIGNING_YOUR_LIFE


class _FailingRepository:
    """BookRepository whose every call fails like a lost connection."""

    def _fail(self, operation: str):
        raise PersistenceError("OperationalError", operation)

    async def insert(self, book):
        self._fail("insert")

    async def find_all(self):
        self._fail("query")

    async def find_by_id(self, book_id):
        self._fail("query")

    async def save(self, book):
        self._fail("update")

    async def delete_by_id(self, book_id):
        self._fail("delete")


class _SaveFailsRepository(_FailingRepository):
    """Lookups succeed, writes fail."""

    async def find_by_id(self, book_id):
        return Book(id=book_id, **DESIGNING_YOUR_LIFE)


@pytest.fixture
def failing_repo(client):
    app.dependency_overrides[get_book_repository] = _FailingRepository
    yield
    app.dependency_overrides.pop(get_book_repository, None)


@pytest.mark.parametrize(
    "method,path,body",
    [
        ("POST", "/books", DESIGNING_YOUR_LIFE),
        ("GET", "/books", None),
        ("GET", "/books/1", None),
        ("PUT", "/books/1", DESIGNING_YOUR_LIFE),
        ("DELETE", "/books/1", None),
    ],
)
async def test_persistence_failure_returns_500(client, failing_repo, method, path, body):
    res = await client.request(method, path, json=body)

    assert res.status_code == 500
    payload = res.json()
    assert payload["code"] == "PERSISTENCE_ERROR"
    assert isinstance(payload["error"], str)
    assert "SELECT" not in payload["error"]


async def test_update_save_failure_returns_500(client):
    app.dependency_overrides[get_book_repository] = _SaveFailsRepository
    try:
        res = await client.put("/books/1", json={"title": "New title"})
    finally:
        app.dependency_overrides.pop(get_book_repository, None)

    assert res.status_code == 500
    assert res.json()["error"] == "Database update failed: OperationalError"


async def test_validation_runs_before_insert(client, failing_repo):
    res = await client.post("/books", json={**DESIGNING_YOUR_LIFE, "isbn": "007"})
    assert res.status_code == 400


async def test_unknown_route_returns_error_body(client):
    res = await client.get("/authors")
    assert res.status_code == 404
    assert res.json()["error"] == "Not Found"


async def test_wrong_method_returns_405(client):
    res = await client.patch("/books/1", json={})
    assert res.status_code == 405
    assert isinstance(res.json()["error"], str)


class _CrashingRepository(_FailingRepository):
    """Raises a non-domain exception, as a programming error would."""

    async def find_all(self):
        raise RuntimeError("connection string: postgres://secret")


async def test_unexpected_error_returns_500_with_request_id(client, caplog):
    caplog.set_level(logging.ERROR, logger="bookstore.request")
    app.dependency_overrides[get_book_repository] = _CrashingRepository
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        ) as c:
            res = await c.get("/books", headers={"X-Request-ID": "crash-1"})
    finally:
        app.dependency_overrides.pop(get_book_repository, None)

    assert res.status_code == 500
    assert res.json()["code"] == "INTERNAL_ERROR"
    assert "secret" not in res.text
    assert res.headers["X-Request-ID"] == "crash-1"

    handled = [
        r for r in caplog.records
        if r.name == "bookstore.request" and r.getMessage().startswith("Unhandled exception")
    ]
    assert len(handled) == 1
    assert handled[0].parent_id == "crash-1"
    assert handled[0].span_id
    assert handled[0].error_code == "INTERNAL_ERROR"
