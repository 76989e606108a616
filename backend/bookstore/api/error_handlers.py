"""Error Handlers — global exception handlers for the bookstore API.

Invariants:
    - BookstoreError → its http_status with to_response() body
    - HTTPException (unknown route, wrong method) → its status, {"error": detail}
    - Exception (catch-all) → 500, never leaks internal details
    - Every error body has a string "error" key
    - Catch-all logs through the request logger and echoes X-Request-ID

Design Decisions:
    - Three-layer handler: domain (BookstoreError), routing (Starlette
      HTTPException), catch-all (Exception)
    - Body validation raises the domain ValidationError from the route, so
      FastAPI's RequestValidationError has no handler here
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.api.middleware import get_request_logger, request_id_headers
from bookstore.core.errors import BookstoreError, ErrorSeverity


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_bookstore_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_bookstore_error_handler(app: FastAPI) -> None:

    @app.exception_handler(BookstoreError)
    async def bookstore_error_handler(request: Request, exc: BookstoreError):
        """Handle all bookstore domain/infrastructure errors."""
        level = (
            logging.ERROR if exc.severity == ErrorSeverity.CRITICAL
            else logging.WARNING
        )
        get_request_logger(request).log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "book_id": exc.context.book_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": "HTTP_ERROR"},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        get_request_logger(request).error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=exc,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        # runs outside the request middleware, so the id header is set here
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
                "category": "internal",
            },
            headers=request_id_headers(request),
        )
