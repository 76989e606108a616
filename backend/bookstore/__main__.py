"""Run the Bookstore API server: python -m bookstore."""

import uvicorn

from bookstore.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
