"""Root conftest — shared test configuration."""

import os

# Routes use an overridden get_db; these only keep Settings() importable offline
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")
