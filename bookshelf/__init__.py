"""Minimal JSON-file backed book collection served over HTTP."""

__version__ = "1.0.0"
