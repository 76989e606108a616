"""SQLAlchemy Book Repository — the single BookRepository adapter.

Invariants:
    - Book.active() composed into every SELECT and into the soft-delete UPDATE
    - insert/save/delete_by_id commit their own unit of work
    - Any SQLAlchemyError rolls the session back and is re-raised as PersistenceError
    - find_all issues no ORDER BY; row order is whatever the store returns

Design Decisions:
    - Soft delete as a single UPDATE ... WHERE id = ? AND deleted_at IS NULL:
      rowcount tells "not found" apart from "deleted" without a prior SELECT
    - refresh() after commit so server-side values are loaded before the
      session is closed
"""

import logging
from collections.abc import Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.core.errors import PersistenceError
from bookstore.models.book import Book

logger = logging.getLogger(__name__)


class SqlAlchemyBookRepository:
    """BookRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _unit(self, operation: str) -> AsyncGenerator[None, None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Book {operation} failed: {e}",
                extra={"error_code": "PERSISTENCE_ERROR"},
            )
            raise PersistenceError(type(e).__name__, operation) from e

    async def insert(self, book: Book) -> Book:
        async with self._unit("insert"):
            self.db.add(book)
            await self.db.commit()
            await self.db.refresh(book)
        return book

    async def find_all(self) -> Sequence[Book]:
        async with self._unit("query"):
            result = await self.db.execute(select(Book).where(Book.active()))
            return result.scalars().all()

    async def find_by_id(self, book_id: int) -> Book | None:
        async with self._unit("query"):
            result = await self.db.execute(
                select(Book).where(Book.id == book_id, Book.active()),
            )
            return result.scalar_one_or_none()

    async def save(self, book: Book) -> Book:
        async with self._unit("update"):
            # full-record save: UPDATE is issued even when no field changed
            book.updated_at = datetime.now(timezone.utc)
            book = await self.db.merge(book)
            await self.db.commit()
            await self.db.refresh(book)
        return book

    async def delete_by_id(self, book_id: int) -> int:
        async with self._unit("delete"):
            result = await self.db.execute(
                update(Book)
                .where(Book.id == book_id, Book.active())
                .values(deleted_at=datetime.now(timezone.utc)),
            )
            await self.db.commit()
            return result.rowcount
