"""
Catch-all endpoint that logs JSON payloads.

Every method and every path land on the same handler: log the request line,
read the body chunk by chunk, log ``end``, parse strictly, log the value and
answer 204 with no body.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response
from starlette.requests import ClientDisconnect
from starlette.types import Receive, Scope, Send

from payload_listener import codec
from payload_listener.exceptions import BodyTooLargeError, MalformedBodyError
from payload_listener.utils import metrics
from payload_listener.utils.logger import get_logger, logging_context

from .errors import install_exception_handlers

logger = get_logger(__name__)


def request_target(request: Request) -> str:
    """Return the request path and query string as the client sent them."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query = request.scope.get("query_string") or b""
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


async def read_body(request: Request, max_body_size: int = 0) -> list[bytes]:
    """Collect the body chunks of ``request``; 0 means no size cap."""
    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        if not chunk:
            continue
        received += len(chunk)
        if max_body_size and received > max_body_size:
            raise BodyTooLargeError(
                f"Request body exceeds {max_body_size} bytes",
                details={"max_body_size": max_body_size, "received": received},
            )
        chunks.append(chunk)
    return chunks


async def observe_payload(request: Request) -> Response | None:
    target = request_target(request)
    logger.info("%s %s", request.method, target)

    with logging_context(method=request.method, target=target):
        try:
            chunks = await read_body(request, request.app.state.max_body_size)
        except BodyTooLargeError:
            metrics.requests_total.labels(outcome="too_large").inc()
            logger.warning("Rejected oversized body for %s %s", request.method, target)
            raise
        except ClientDisconnect:
            metrics.requests_total.labels(outcome="disconnected").inc()
            logger.debug("Client disconnected before end of body")
            return None

        logger.info("end")
        size = sum(len(c) for c in chunks)
        metrics.body_bytes_total.inc(size)
        metrics.body_size_bytes.observe(size)

        try:
            value = codec.parse_strict(codec.decode_body(chunks))
        except MalformedBodyError as exc:
            metrics.requests_total.labels(outcome="malformed").inc()
            logger.warning(
                "Malformed JSON body for %s %s: %s", request.method, target, exc.message
            )
            raise

        logger.info("%s", codec.render(value))
        metrics.requests_total.labels(outcome="ok").inc()
    return Response(status_code=204)


class PayloadEndpoint:
    """ASGI endpoint wrapping :func:`observe_payload`.

    Starlette limits plain-function routes to GET and HEAD; an ASGI app route
    keeps ``methods=None`` and so receives every method, non-standard ones
    included.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = await observe_payload(Request(scope, receive))
        if response is not None:
            await response(scope, receive, send)


def create_app(max_body_size: int = 0) -> FastAPI:
    """Create the listener application.

    Args:
        max_body_size: byte cap on request bodies; 0 disables the cap.
    """
    app = FastAPI(
        title="payload-listener",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.max_body_size = max_body_size
    install_exception_handlers(app)
    app.add_route("/{path:path}", PayloadEndpoint(), include_in_schema=False)
    return app
