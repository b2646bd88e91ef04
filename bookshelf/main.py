# bookshelf/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .books import books_router
from .config import Settings, get_settings
from .logging_config import setup_logging
from .storage import BookStore


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application around a ``BookStore``.

    The store is created from ``settings.books_file`` and attached to
    ``app.state``; the seed collection is written at startup when the file
    does not exist yet.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    store = BookStore(settings.books_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.ensure_seeded()
        logger.info("Serving books from %s", store.path)
        yield

    app = FastAPI(
        title=settings.app_name,
        description="CRUD over a single collection of books persisted to a JSON file.",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render errors as ``{"error": message}``."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.get("/")
    def health_check():
        return {"status": "ok"}

    app.include_router(books_router)
    return app
