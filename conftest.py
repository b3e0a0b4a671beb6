"""
Early pytest configuration plugin.

This file is loaded early by pytest to set up the test environment
before any test modules are imported.
"""

import os
import socket

import pytest


def _find_free_port() -> int:
    """Find a free port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return int(s.getsockname()[1])


@pytest.fixture
def free_tcp_port() -> int:
    """Provide a free TCP port for tests."""
    return _find_free_port()


def pytest_configure(config):
    """
    Keep a developer's local config/listener.conf out of the test run.

    This hook runs before test collection and imports.
    """
    os.environ["LISTENER_CONFIG"] = os.path.join(
        str(config.rootpath), "tests", "no-such-listener.conf"
    )
    for key in list(os.environ):
        if key.startswith("LISTENER_") and key != "LISTENER_CONFIG":
            del os.environ[key]
