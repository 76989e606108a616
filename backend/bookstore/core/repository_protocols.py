"""Boundary Protocols — contract between the HTTP handlers and persistence.

Invariants:
    - Handlers depend on BookRepository only, never on AsyncSession directly
    - Every failure of a repository method surfaces as PersistenceError
    - Reads never return soft-deleted rows
    - delete_by_id returns the number of rows it soft-deleted (0 or 1)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy; the
      SQLAlchemy adapter and test fakes satisfy it without subclassing
"""

from collections.abc import Sequence
from typing import Protocol

from bookstore.models.book import Book


class BookRepository(Protocol):
    """Contract for book persistence, implemented by infrastructure/book_repository.py."""
    async def insert(self, book: Book) -> Book: ...
    async def find_all(self) -> Sequence[Book]: ...
    async def find_by_id(self, book_id: int) -> Book | None: ...
    async def save(self, book: Book) -> Book: ...
    async def delete_by_id(self, book_id: int) -> int: ...
