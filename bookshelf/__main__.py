"""Run the service with uvicorn: ``python -m bookshelf``.

Host, port and data file come from the environment (``HOST``, ``PORT``,
``BOOKS_FILE``); see ``bookshelf.config``.
"""
import uvicorn

from .config import get_settings
from .main import create_app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
