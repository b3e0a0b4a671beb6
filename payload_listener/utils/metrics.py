from __future__ import annotations

from prometheus_client import REGISTRY, Counter, Histogram, start_http_server

from payload_listener.exceptions import BindError
from payload_listener.utils.logger import get_logger

logger = get_logger(__name__)

NAMESPACE = "listener"


def _fullname(name: str, namespace: str | None) -> str:
    return f"{namespace}_{name}" if namespace else name


def _get_existing(fullname: str):
    # Access default registry for collectors registered by an earlier import
    reg = getattr(REGISTRY, "_names_to_collectors", {})
    if isinstance(reg, dict):
        return reg.get(fullname)
    return None


def safe_counter(
    name: str,
    documentation: str,
    labelnames: list[str] | None = None,
    namespace: str | None = None,
):
    fullname = _fullname(name, namespace)
    existing = _get_existing(fullname)
    if existing is not None:
        return existing
    return Counter(name, documentation, labelnames or [], namespace=namespace or "")


def safe_histogram(
    name: str,
    documentation: str,
    buckets: list[float] | None = None,
    namespace: str | None = None,
):
    fullname = _fullname(name, namespace)
    existing = _get_existing(fullname)
    if existing is not None:
        return existing
    if buckets:
        return Histogram(
            name, documentation, buckets=tuple(buckets), namespace=namespace or ""
        )
    return Histogram(name, documentation, namespace=namespace or "")


def start_exporter(port: int, host: str = "") -> None:
    """Serve the default registry over HTTP on ``port``."""
    try:
        start_http_server(port, addr=host or "0.0.0.0")
    except OSError as exc:
        raise BindError(
            f"Could not start metrics exporter on port {port}",
            details={"host": host or "0.0.0.0", "error": str(exc)},
        ) from exc
    logger.info("Metrics exporter listening on %s:%d", host or "0.0.0.0", port)


# Request outcomes: ok, malformed, too_large, disconnected
requests_total = safe_counter(
    "requests_total",
    "Requests handled by the listener, by outcome",
    ["outcome"],
    namespace=NAMESPACE,
)
body_bytes_total = safe_counter(
    "body_bytes_total",
    "Request body bytes received by the listener",
    [],
    namespace=NAMESPACE,
)
body_size_bytes = safe_histogram(
    "body_size_bytes",
    "Size of request bodies received by the listener",
    buckets=[64, 256, 1024, 4096, 16384, 65536, 262144, 1048576],
    namespace=NAMESPACE,
)
