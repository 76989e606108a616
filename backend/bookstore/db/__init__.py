"""Database Declarations — SQLAlchemy declarative Base shared by all models.

Invariants:
    - Base.metadata is the single source of truth for table definitions
"""
