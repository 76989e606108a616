"""ORM Models — SQLAlchemy declarative models for the bookstore tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all()
"""

from bookstore.models.book import Book  # noqa: F401
