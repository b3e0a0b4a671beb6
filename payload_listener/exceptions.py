# payload_listener/exceptions.py
"""
Custom exceptions for the payload listener.
"""

from typing import Any


class ListenerError(Exception):
    """Base exception for all listener errors."""

    status_code = 500
    error_code = "server_error"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ListenerError):
    """Raised when configuration values cannot be used."""

    status_code = 500
    error_code = "config_error"

    def __init__(
        self, message: str, field: str | None = None, value: Any = None, **kwargs: Any
    ):
        details = {"field": field, "value": value, **kwargs}
        super().__init__(message, details)
        self.field = field
        self.value = value


# Request body exceptions
class MalformedBodyError(ListenerError, ValueError):
    """Raised when a request body is not strict JSON.

    Subclasses ValueError so callers treating it as a parse failure keep working.
    """

    status_code = 400
    error_code = "malformed_body"


class BodyTooLargeError(ListenerError):
    """Raised when a request body exceeds the configured size cap."""

    status_code = 413
    error_code = "body_too_large"


# Startup exceptions
class BindError(ListenerError):
    """Raised when no listening socket could be bound."""

    status_code = 500
    error_code = "bind_error"
