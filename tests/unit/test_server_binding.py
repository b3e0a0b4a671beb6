"""Unit tests for ListenerServer bind handling."""

from __future__ import annotations

import socket

import pytest

from payload_listener.exceptions import BindError
from payload_listener.server import BindResult, ListenerServer
from payload_listener.web import create_app


def _ipv6_available() -> bool:
    if not socket.has_ipv6:
        return False
    try:
        with socket.socket(socket.AF_INET6, socket.SOCK_STREAM) as s:
            s.bind(("::", 0))
        return True
    except OSError:
        return False


def test_defaults_bind_both_wildcards_on_8888():
    server = ListenerServer(create_app())
    assert server.port == 8888
    assert server.hosts == ["0.0.0.0", "::"]


def test_bind_reports_success_and_actual_port(caplog):
    caplog.set_level("INFO", logger="payload_listener")
    server = ListenerServer(create_app(), port=0, hosts=["127.0.0.1"])
    try:
        result = server.bind("127.0.0.1")
        assert result.ok
        assert result.error is None
        assert result.family == socket.AF_INET
        assert result.port > 0
        assert result.sock is not None
        assert server.sockets == [result.sock]
        assert f"server listening on 127.0.0.1:{result.port}" in caplog.text
    finally:
        server.close()


def test_bind_on_busy_port_returns_failure(free_tcp_port):
    first = ListenerServer(create_app(), port=free_tcp_port, hosts=["127.0.0.1"])
    second = ListenerServer(create_app(), port=free_tcp_port, hosts=["127.0.0.1"])
    try:
        assert first.bind("127.0.0.1").ok
        result = second.bind("127.0.0.1")
        assert not result.ok
        assert result.sock is None
        assert result.error
        assert second.sockets == []
    finally:
        first.close()
        second.close()


def test_bind_all_raises_when_nothing_bound(free_tcp_port):
    holder = ListenerServer(create_app(), port=free_tcp_port, hosts=["127.0.0.1"])
    holder.bind_all()
    server = ListenerServer(create_app(), port=free_tcp_port, hosts=["127.0.0.1"])
    try:
        with pytest.raises(BindError) as exc_info:
            server.bind_all()
        assert "127.0.0.1" in exc_info.value.details
    finally:
        holder.close()
        server.close()


def test_bind_all_tolerates_a_failed_bind(free_tcp_port):
    server = ListenerServer(
        create_app(), port=free_tcp_port, hosts=["127.0.0.1", "127.0.0.1"]
    )
    try:
        first, second = server.bind_all()
        assert first.ok
        assert not second.ok
        assert len(server.sockets) == 1
    finally:
        server.close()


def test_unresolvable_host_is_a_failed_bind():
    server = ListenerServer(create_app(), port=0, hosts=["no such host.invalid"])
    result = server.bind("no such host.invalid")
    assert not result.ok
    assert result.family is None


@pytest.mark.ipv6
@pytest.mark.skipif(not _ipv6_available(), reason="IPv6 not available")
def test_ipv4_and_ipv6_wildcards_share_a_port(free_tcp_port):
    server = ListenerServer(create_app(), port=free_tcp_port)
    try:
        v4, v6 = server.bind_all()
        assert v4.ok and v6.ok
        assert v4.family == socket.AF_INET
        assert v6.family == socket.AF_INET6
        assert v6.sock.getsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY) == 1
        assert v6.address == f":::{free_tcp_port}"
    finally:
        server.close()


def test_close_releases_sockets(free_tcp_port):
    server = ListenerServer(create_app(), port=free_tcp_port, hosts=["127.0.0.1"])
    server.bind_all()
    server.close()
    assert server.binds == []
    with socket.socket() as s:
        s.bind(("127.0.0.1", free_tcp_port))


def test_bind_result_address():
    r = BindResult("0.0.0.0", 8888, socket.AF_INET, ok=True)
    assert r.address == "0.0.0.0:8888"
