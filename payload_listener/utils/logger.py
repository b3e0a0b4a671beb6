"""Project-wide logging helpers built on the logging_config utilities."""

from __future__ import annotations

import logging
from typing import Any

from .logging_config import (
    StructuredJSONFormatter,
    StructuredLoggerAdapter,
    configure_logging,
    logging_context,
)

__all__ = ["configure", "get_logger", "logging_context"]


def configure(
    *,
    level: int = logging.INFO,
    handlers: list[logging.Handler] | None = None,
    json_output: bool = False,
) -> None:
    """Configure application logging; JSON records when ``json_output`` is set."""
    formatter = StructuredJSONFormatter() if json_output else None
    configure_logging(level=level, handlers=handlers, formatter=formatter)


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a structured logger adapter for the provided name."""
    static = {k: v for k, v in context.items() if v is not None}
    return StructuredLoggerAdapter(logging.getLogger(name), static)
