"""Bookstore API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BookstoreError → structured JSON responses
    - Every request passes through the request logger middleware (correlation ids)
    - Database initialized on startup and disposed on shutdown via lifespan
    - OpenAPI docs generated from route declarations, served at /swagger

Design Decisions:
    - Lifespan over @app.on_event: single place for startup/shutdown
    - database_auto_migrate creates missing tables at startup; alembic owns
      schema changes beyond that
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookstore.api.error_handlers import register_error_handlers
from bookstore.api.middleware import register_request_logger
from bookstore.api.routes import books, health
from bookstore.config import get_settings
from bookstore.infrastructure.database import close_db, init_db
from bookstore.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_auto_migrate:
        await manager.create_all()
    logger.info("Bookstore API started")
    yield
    await close_db()
    logger.info("Bookstore API shut down")


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=(
            "CRUD API for book records: create, list, fetch, update and "
            "soft-delete books with ISBN validation."
        ),
        contact={"name": "API Support Team"},
        docs_url="/swagger",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_logger(app)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(books.router)
    return app


app = create_app()
