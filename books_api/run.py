"""Run the books API with uvicorn.

Host, port and log level come from the environment (or ``.env``), see
``books_api.config.settings``.

Usage:
    books-api
    python -m books_api.run
"""
import uvicorn

from books_api.config import settings


def main() -> None:
    uvicorn.run(
        "books_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
