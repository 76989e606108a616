"""Request Logger Middleware — per-request correlation ids and access logging.

Invariants:
    - parent_id = incoming X-Request-ID header, or a fresh UUID4 when absent
    - span_id = fresh UUID4 for every request
    - request.state.logger carries both ids on every record it emits
    - Response echoes X-Request-ID: <parent_id>
    - get_request_logger never fails: falls back to the module logger

Design Decisions:
    - LoggerAdapter stored on request.state over contextvars: handlers receive
      the Request anyway, and the adapter is visible in tests
    - Unhandled exceptions are logged here and re-raised; the catch-all
      handler builds the 500 response and sets X-Request-ID itself
"""

import logging
import time
import uuid
from typing import Any, MutableMapping

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
PARENT_ID_LOG_FIELD = "parent_id"
SPAN_ID_LOG_FIELD = "span_id"

logger = logging.getLogger("bookstore.request")


class RequestLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges call-site extra={} with the correlation ids."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any],
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def logger_with_parent_and_span_id(
    request: Request, base: logging.Logger = logger,
) -> RequestLoggerAdapter:
    parent_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    span_id = str(uuid.uuid4())
    return RequestLoggerAdapter(
        base, {PARENT_ID_LOG_FIELD: parent_id, SPAN_ID_LOG_FIELD: span_id},
    )


def get_request_logger(request: Request) -> logging.LoggerAdapter | logging.Logger:
    """Request-scoped logger set by the middleware, or the plain module logger."""
    request_logger = getattr(request.state, "logger", None)
    if isinstance(request_logger, logging.LoggerAdapter):
        return request_logger
    return logger


def request_id_headers(request: Request) -> dict[str, str]:
    """X-Request-ID header for responses built outside the middleware."""
    request_logger = getattr(request.state, "logger", None)
    if isinstance(request_logger, logging.LoggerAdapter):
        return {REQUEST_ID_HEADER: request_logger.extra[PARENT_ID_LOG_FIELD]}
    return {}


def register_request_logger(app: FastAPI) -> None:
    """Attach the request logger middleware to the app."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_logger = logger_with_parent_and_span_id(request)
        request.state.logger = request_logger
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            request_logger.exception(
                "request.error",
                extra={"method": request.method, "path": request.url.path},
            )
            raise
        request_logger.info(
            "request.end",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
            },
        )
        response.headers.setdefault(
            REQUEST_ID_HEADER, request_logger.extra[PARENT_ID_LOG_FIELD],
        )
        return response
