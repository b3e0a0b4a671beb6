"""Strict JSON decoding with exact integers, and rendering for log output.

Integer literals decode to Python ``int`` so values past 2**53 keep every
digit, however long the literal. Strict mode rejects what a lenient reader would let through:

- trailing content after the top-level value
- ``NaN``, ``Infinity`` and ``-Infinity`` literals
- fractional or exponent numbers that overflow a float, such as ``1e400``
- duplicate keys within one object
"""

from __future__ import annotations

import json
import math
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from payload_listener.exceptions import MalformedBodyError

__all__ = ["decode_body", "parse_strict", "render"]


def _reject_constant(name: str) -> Any:
    raise MalformedBodyError(
        f"Non-standard JSON constant {name!r}", details={"constant": name}
    )


def _unique_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise MalformedBodyError(
                f"Duplicate key {key!r}", details={"key": key}
            )
        obj[key] = value
    return obj


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise MalformedBodyError(
            f"Number {literal!r} is out of range", details={"number": literal}
        )
    return value


_DECODER = json.JSONDecoder(
    object_pairs_hook=_unique_object,
    parse_float=_finite_float,
    parse_constant=_reject_constant,
    strict=True,
)


@contextmanager
def _unbounded_int_digits() -> Iterator[None]:
    # int <-> str conversions are capped at 4300 digits by default.
    # Callers never await inside the block, so no other request observes the change.
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(0)
    try:
        yield
    finally:
        sys.set_int_max_str_digits(previous)


def decode_body(chunks: list[bytes] | bytes) -> str:
    """Join received chunks and decode them as UTF-8 text.

    Chunks are joined before decoding so a multi-byte sequence split across
    two reads survives. Invalid sequences become U+FFFD.
    """
    raw = chunks if isinstance(chunks, bytes) else b"".join(chunks)
    return raw.decode("utf-8", errors="replace")


def parse_strict(text: str) -> Any:
    """Parse ``text`` as exactly one JSON value.

    Raises:
        MalformedBodyError: the text is empty, not JSON, or breaks strict mode.
    """
    try:
        with _unbounded_int_digits():
            return _DECODER.decode(text)
    except json.JSONDecodeError as exc:
        raise MalformedBodyError(
            exc.msg, details={"line": exc.lineno, "column": exc.colno, "pos": exc.pos}
        ) from exc


def render(value: Any) -> str:
    """Render a parsed value for inspection in the console log."""
    with _unbounded_int_digits():
        return json.dumps(value, indent=2, ensure_ascii=False)
