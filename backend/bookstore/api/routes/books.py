"""Books Resource — CRUD handlers for /books.

Invariants:
    - Handlers hold no state between requests; persistence only via BookRepository
    - Body is bound and validated before any write reaches the repository
    - Update looks the book up first: a miss is 404 before the body is read
    - Update binds onto the stored fields: keys absent from the body keep their values
    - A non-numeric or out-of-range id matches no row (404), never 400/500

Design Decisions:
    - Body read from Request instead of a typed body parameter: FastAPI would
      validate the body before the Update lookup runs; the OpenAPI request
      schema is supplied through openapi_extra instead
    - BookPayload class is the shared validator, built once at import
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.api.middleware import get_request_logger
from bookstore.core.book_rules import bind_fields, format_validation_errors
from bookstore.core.errors import (
    BindError, ErrorContext, NotFoundError, ValidationError,
)
from bookstore.core.repository_protocols import BookRepository
from bookstore.infrastructure.book_repository import SqlAlchemyBookRepository
from bookstore.infrastructure.database import get_db
from bookstore.models.book import Book
from bookstore.schemas.book import (
    BookPayload, BookResponse, ErrorResponse, MessageResponse,
)

router = APIRouter(prefix="/books", tags=["books"])

# books.id is a 32-bit INTEGER column
MAX_BOOK_ID = 2**31 - 1

_BOOK_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {"schema": BookPayload.model_json_schema()},
        },
    },
}


def get_book_repository(db: AsyncSession = Depends(get_db)) -> BookRepository:
    """FastAPI dependency: the SQLAlchemy adapter bound to the request session."""
    return SqlAlchemyBookRepository(db)


def parse_book_id(raw: str) -> int:
    """Path id → int, or NotFoundError when it cannot name a stored book."""
    if not (raw.isascii() and raw.isdigit()) or int(raw) > MAX_BOOK_ID:
        raise NotFoundError(context=ErrorContext(book_id=raw))
    return int(raw)


async def read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        raise BindError("Request body is empty")
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        raise BindError("Malformed JSON body")


def validate_book(fields: dict[str, str]) -> BookPayload:
    try:
        return BookPayload.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e.errors()))


async def _find_or_404(repo: BookRepository, raw_id: str) -> Book:
    book_id = parse_book_id(raw_id)
    book = await repo.find_by_id(book_id)
    if book is None:
        raise NotFoundError(context=ErrorContext(book_id=raw_id))
    return book


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    openapi_extra=_BOOK_BODY,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid body or fields"},
        500: {"model": ErrorResponse, "description": "Database failure"},
    },
)
async def create_book(
    request: Request, repo: BookRepository = Depends(get_book_repository),
):
    """Validate the body and insert a new book. Returns the stored record."""
    log = get_request_logger(request)
    payload = validate_book(bind_fields(await read_json_body(request)))
    book = await repo.insert(Book(**payload.model_dump()))
    log.info("book created", extra={"book_id": book.id})
    return BookResponse.model_validate(book)


@router.get(
    "",
    response_model=list[BookResponse],
    summary="Get all books",
    responses={500: {"model": ErrorResponse}},
)
async def list_books(repo: BookRepository = Depends(get_book_repository)):
    """All books that are not deleted, unfiltered and unpaginated."""
    books = await repo.find_all()
    return [BookResponse.model_validate(b) for b in books]


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by id",
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_book(
    book_id: str, repo: BookRepository = Depends(get_book_repository),
):
    book = await _find_or_404(repo, book_id)
    return BookResponse.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    openapi_extra=_BOOK_BODY,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def update_book(
    book_id: str,
    request: Request,
    repo: BookRepository = Depends(get_book_repository),
):
    """Bind the body onto the stored book, validate the result and save it."""
    log = get_request_logger(request)
    book = await _find_or_404(repo, book_id)
    fields = bind_fields(await read_json_body(request), book.field_values())
    payload = validate_book(fields)
    book.title = payload.title
    book.author = payload.author
    book.isbn = payload.isbn
    book = await repo.save(book)
    log.info("book updated", extra={"book_id": book.id})
    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delete_book(
    book_id: str,
    request: Request,
    repo: BookRepository = Depends(get_book_repository),
):
    """Soft-delete a book; it disappears from every later read."""
    parsed_id = parse_book_id(book_id)
    affected = await repo.delete_by_id(parsed_id)
    if affected == 0:
        raise NotFoundError(context=ErrorContext(book_id=book_id))
    get_request_logger(request).info(
        "book deleted", extra={"book_id": parsed_id},
    )
    return MessageResponse(message="Book successfully deleted")
