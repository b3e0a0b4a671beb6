from __future__ import annotations

import asyncio
import socket
from dataclasses import dataclass
from typing import Any, Iterable

import uvicorn

from payload_listener.config.constants import DEFAULT_HOSTS, DEFAULT_PORT
from payload_listener.exceptions import BindError
from payload_listener.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BindResult:
    """Outcome of binding one wildcard address."""

    host: str
    port: int
    family: socket.AddressFamily | None
    ok: bool
    error: str | None = None
    sock: socket.socket | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class ListenerServer:
    """
    Owns the listening sockets and the uvicorn server driving the app.

    Each configured host is bound by its own bind() call, one socket per
    address family, before serving starts. IPv6 sockets are IPV6_V6ONLY so
    the IPv4 and IPv6 wildcards never collide on dual-stack hosts. A failed
    bind is logged and reported in its BindResult; serving needs at least
    one successful bind.
    """

    def __init__(
        self,
        app: Any,
        port: int = DEFAULT_PORT,
        hosts: Iterable[str] = DEFAULT_HOSTS,
        backlog: int = 128,
    ):
        self.app = app
        self.port = port
        self.hosts = list(hosts)
        self.backlog = backlog
        self.binds: list[BindResult] = []
        self._server: uvicorn.Server | None = None

    # ---------- binding ----------

    def bind(self, host: str) -> BindResult:
        """Bind and listen on ``host``; never raises for socket errors."""
        family: socket.AddressFamily | None = None
        sock: socket.socket | None = None
        try:
            infos = socket.getaddrinfo(
                host, self.port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
            )
            family, socktype, proto, _, sockaddr = infos[0]
            sock = socket.socket(family, socktype, proto)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            if family == socket.AF_INET6:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 1)
            sock.bind(sockaddr)
            sock.listen(self.backlog)
            sock.setblocking(False)
        except OSError as exc:
            if sock is not None:
                sock.close()
            logger.error("Failed to bind %s:%d: %s", host, self.port, exc)
            result = BindResult(host, self.port, family, ok=False, error=str(exc))
            self.binds.append(result)
            return result

        bound_port = sock.getsockname()[1]
        result = BindResult(host, bound_port, family, ok=True, sock=sock)
        self.binds.append(result)
        logger.info("server listening on %s", result.address)
        return result

    def bind_all(self) -> list[BindResult]:
        """Bind every configured host; raise BindError when none succeeded."""
        results = [self.bind(host) for host in self.hosts]
        if not any(r.ok for r in results):
            raise BindError(
                f"Could not bind port {self.port} on any address",
                details={r.host: r.error for r in results},
            )
        return results

    @property
    def sockets(self) -> list[socket.socket]:
        return [r.sock for r in self.binds if r.ok and r.sock is not None]

    # ---------- lifecycle ----------

    @property
    def started(self) -> bool:
        return bool(self._server and self._server.started)

    async def serve(self) -> None:
        """Serve the app on the bound sockets until stop() is called."""
        if not self.sockets:
            self.bind_all()
        config = uvicorn.Config(
            self.app,
            log_config=None,
            log_level="warning",
            access_log=False,
            lifespan="off",
            server_header=False,
            date_header=False,
        )
        self._server = uvicorn.Server(config)
        try:
            await self._server.serve(sockets=self.sockets)
        finally:
            self.close()

    async def wait_started(self, timeout: float = 5.0) -> None:
        """Wait until serve() has its listeners running."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not self.started:
            if loop.time() > deadline:
                raise asyncio.TimeoutError("listener did not start")
            await asyncio.sleep(0.01)

    def stop(self) -> None:
        """Ask the running server to exit."""
        if self._server is not None:
            self._server.should_exit = True

    def close(self) -> None:
        """Close every listening socket still open."""
        for result in self.binds:
            if result.sock is not None:
                result.sock.close()
        self.binds.clear()
