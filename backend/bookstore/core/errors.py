"""Error Hierarchy — typed, categorized exceptions for all bookstore failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400/404) carry ERROR severity; persistence errors are CRITICAL
    - to_response() always puts a human-readable string under "error"
    - No driver or SQL details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BookstoreError base: one global handler catches all
    - Validation details are a list of {field, message, type} dicts, the same
      shape for Create and Update
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    BIND = "bind"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Extra context attached to an error for logs, never for clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    book_id: str | None = None
    debug_info: dict[str, Any] | None = None


class BookstoreError(Exception):
    """Base exception for all bookstore errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {
            "error": self.message,
            "code": self.code,
            "category": self.category.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class BindError(BookstoreError):
    """Request body is not a well-formed JSON object of string fields."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "BIND_ERROR", ErrorCategory.BIND,
            ErrorSeverity.ERROR, context, 400,
        )


class ValidationError(BookstoreError):
    """One or more book fields failed validation."""
    def __init__(
        self, details: list[dict[str, str]], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Validation failed", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details

    @property
    def fields(self) -> list[str]:
        return [d["field"] for d in self.details]

    def to_response(self) -> dict:
        response = super().to_response()
        response["details"] = self.details
        return response


class NotFoundError(BookstoreError):
    """Referenced book is absent or soft-deleted."""
    def __init__(
        self, resource_type: str = "Book", context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found", "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(BookstoreError):
    """Database operation failed."""
    def __init__(
        self, message: str, operation: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
