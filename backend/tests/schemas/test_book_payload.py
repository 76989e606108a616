"""Book schemas — BookPayload validation and BookResponse serialization.

Invariants:
    - title, author, isbn required and non-empty
    - isbn must pass the 10/13 digit rule, reported as type "isbn_format"
    - BookPayload is immutable
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from bookstore.models.book import Book
from bookstore.schemas.book import BookPayload, BookResponse


def test_payload_accepts_valid_book():
    payload = BookPayload(title="Atomic Habits", author="James Clear", isbn="9781847941831")
    assert payload.isbn == "9781847941831"


@pytest.mark.parametrize("field", ["title", "author", "isbn"])
def test_payload_rejects_empty_field(field):
    data = {"title": "T", "author": "A", "isbn": "0062315005", field: ""}
    with pytest.raises(ValidationError) as exc_info:
        BookPayload(**data)
    assert exc_info.value.errors()[0]["loc"] == (field,)


def test_payload_reports_every_missing_field():
    with pytest.raises(ValidationError) as exc_info:
        BookPayload.model_validate({})
    assert {e["loc"][0] for e in exc_info.value.errors()} == {"title", "author", "isbn"}


def test_payload_isbn_error_type():
    with pytest.raises(ValidationError) as exc_info:
        BookPayload(title="T", author="A", isbn="12345")
    error = exc_info.value.errors()[0]
    assert error["type"] == "isbn_format"
    assert error["msg"] == "isbn must be exactly 10 or 13 digits"


def test_payload_is_frozen():
    payload = BookPayload(title="T", author="A", isbn="0062315005")
    with pytest.raises(ValidationError):
        payload.title = "Other"


def test_response_from_orm_object_omits_deleted_at():
    now = datetime.now(timezone.utc)
    book = Book(
        id=3, title="T", author="A", isbn="0062315005",
        created_at=now, updated_at=now, deleted_at=None,
    )
    dumped = BookResponse.model_validate(book).model_dump()
    assert dumped["id"] == 3
    assert "deleted_at" not in dumped
