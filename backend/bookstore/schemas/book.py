"""Book Schemas — payload validation and response serialization for /books.

Invariants:
    - BookPayload: title, author, isbn all required and non-empty
    - BookPayload.isbn matches the 10/13 digit rule (core/book_rules.py)
    - BookPayload is frozen; the class itself is the process-wide validator
    - BookResponse never exposes deleted_at

Design Decisions:
    - PydanticCustomError for the ISBN rule: clean message and a stable
      "isbn_format" error type in the details list
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from bookstore.core.book_rules import is_valid_isbn


class BookPayload(BaseModel):
    """Book fields as supplied by the client."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = Field(min_length=1, examples=["Designing Your Life"])
    author: str = Field(
        min_length=1, examples=["Bill Burnett and Dave Evans"],
    )
    isbn: str = Field(min_length=1, examples=["9781101875322"])

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v: str) -> str:
        if not is_valid_isbn(v):
            raise PydanticCustomError(
                "isbn_format", "isbn must be exactly 10 or 13 digits",
            )
        return v


class BookResponse(BaseModel):
    """Stored book as returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    isbn: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error envelope (documentation only; handlers build the dict directly)."""
    error: str
    code: str
    category: str | None = None
    timestamp: datetime | None = None
    details: list[dict[str, str]] | None = None
