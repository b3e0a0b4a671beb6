"""Root logging setup for the listener: plain text lines or one JSON object per line."""

from __future__ import annotations

import json
import logging
import traceback
from collections.abc import Iterable, Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "TEXT_FORMAT",
    "configure_logging",
    "logging_context",
    "StructuredJSONFormatter",
    "StructuredLoggerAdapter",
]

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "context"}

_request_fields: ContextVar[dict[str, Any]] = ContextVar(
    "listener_request_fields", default={}
)


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Fields bound with :func:`logging_context` (the request method and target
    while a payload is being handled) and keyword fields passed through
    :class:`StructuredLoggerAdapter` become top-level keys.
    """

    service = "payload_listener"

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service,
        }
        bound = getattr(record, "context", None) or _request_fields.get()
        for key, value in bound.items():
            entry.setdefault(key, value)
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry.setdefault(key, value)

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__ if exc_type else "",
                "message": str(exc),
                "stack": "".join(traceback.format_exception(*record.exc_info)).strip(),
            }
        return json.dumps(entry, default=repr)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Accept ``logger.info("msg", field=value)`` and attach bound request fields."""

    _PASSTHROUGH = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.setdefault("extra", {})
        for key in [k for k in kwargs if k not in self._PASSTHROUGH]:
            extra.setdefault(key, kwargs.pop(key))
        bound = {**_request_fields.get(), **(self.extra or {})}
        if bound:
            extra.setdefault("context", bound)
        return msg, kwargs


def configure_logging(
    level: int = logging.INFO,
    *,
    stream: Any | None = None,
    handlers: Iterable[logging.Handler] | None = None,
    formatter: logging.Formatter | None = None,
) -> None:
    """Replace the root handlers; text format unless ``formatter`` is given."""
    formatter = formatter or logging.Formatter(TEXT_FORMAT)
    root = logging.getLogger()
    root.handlers = []
    for handler in handlers or [logging.StreamHandler(stream)]:
        if handler.level == logging.NOTSET:
            handler.setLevel(level)
        if handler.formatter is None:
            handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)


@contextmanager
def logging_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every record logged inside the block."""
    merged = {**_request_fields.get()}
    merged.update((k, v) for k, v in fields.items() if v is not None)
    token = _request_fields.set(merged)
    try:
        yield
    finally:
        _request_fields.reset(token)
