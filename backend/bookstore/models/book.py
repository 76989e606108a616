"""Book ORM — persists book records with soft deletion.

Invariants:
    - id is an autoincrement integer primary key, assigned by the store, never rewritten
    - title, author, isbn are non-nullable
    - deleted_at IS NULL means active; any timestamp means logically deleted
    - updated_at refreshed on every UPDATE issued through the ORM

Design Decisions:
    - Integer id over UUID: monotonic identifiers, matching the public /books/{id} contract
    - Soft delete via deleted_at column: rows are kept, reads filter on Book.active()
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.elements import ColumnElement

from bookstore.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """Book entity, the only resource of the API."""
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    isbn: Mapped[str] = mapped_column(String(13), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True,
    )

    @classmethod
    def active(cls) -> ColumnElement[bool]:
        """Predicate selecting rows that are not soft-deleted."""
        return cls.deleted_at.is_(None)

    def field_values(self) -> dict[str, str]:
        """Client-editable fields, used as the base when binding an update."""
        return {"title": self.title, "author": self.author, "isbn": self.isbn}

    def __repr__(self) -> str:
        return f"<Book id={self.id} isbn={self.isbn!r}>"
