"""
Books package: the HTTP surface of the service.

Handlers receive the ``BookStore`` through the ``get_store`` dependency,
which reads it from ``app.state``; the package itself holds no file path
or other module-level state.
"""

from .router import router as books_router  # noqa: F401
