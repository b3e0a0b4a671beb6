"""
Shared fixtures for listener tests.
"""

from __future__ import annotations

import logging

import pytest

APP_LOGGER = "payload_listener.web.app"


@pytest.fixture
def restore_root_logging():
    """Restore root handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def app_messages(caplog):
    """Return a callable listing messages logged by the request handler."""
    caplog.set_level(logging.DEBUG, logger="payload_listener")

    def _messages() -> list[str]:
        return [r.getMessage() for r in caplog.records if r.name == APP_LOGGER]

    return _messages
