"""ASGI application serving the catch-all payload endpoint."""

from .app import create_app

__all__ = ["create_app"]
