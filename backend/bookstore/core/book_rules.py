"""Book Rules — ISBN format rule and request-body binding for the Book resource.

Invariants:
    - ISBN is exactly 10 or exactly 13 ASCII digits, no separators, no checksum
    - ISBN_PATTERN compiled once at import; shared read-only by every request
    - bind_fields never mutates its inputs; returns a new dict
    - Only BOOK_FIELDS are bound; unknown keys (including "id") are ignored

Design Decisions:
    - fullmatch + re.ASCII: "$" alone accepts a trailing newline and \\d alone
      accepts non-ASCII digits
    - JSON null is treated as "field not supplied"; on update it keeps the stored value
"""

import re
from typing import Any

from bookstore.core.errors import BindError

ISBN_PATTERN = re.compile(r"\d{10}(\d{3})?", re.ASCII)

BOOK_FIELDS = ("title", "author", "isbn")


def is_valid_isbn(value: str) -> bool:
    """True when value is a 10- or 13-digit ISBN without hyphens."""
    return ISBN_PATTERN.fullmatch(value) is not None


def bind_fields(body: Any, base: dict[str, str] | None = None) -> dict[str, str]:
    """Bind a decoded JSON body onto base field values.

    Raises BindError when the body is not an object or a bound field is not a
    string. Fields absent from the body keep their value from base.
    """
    if not isinstance(body, dict):
        raise BindError("Request body must be a JSON object")
    bound = dict(base or {})
    for name in BOOK_FIELDS:
        value = body.get(name)
        if value is None:
            continue
        if not isinstance(value, str):
            raise BindError(f"Field '{name}' must be a string")
        bound[name] = value
    return bound


def format_validation_errors(errors: list[dict]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into {field, message, type} entries."""
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in errors
    ]
