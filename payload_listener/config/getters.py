"""Configuration getter functions.

All getters are pure functions: ConfigParser -> dict.
Values are validated here; a bad value raises ConfigurationError.
"""

import configparser
import logging
from typing import Any

from payload_listener.exceptions import ConfigurationError

from .constants import (
    LOG_FORMATS,
    SECTION_LOGGING,
    SECTION_METRICS,
    SECTION_SERVER,
    TRUE_VALUES,
)
from .loader import parse_size


def _get_port(config: configparser.ConfigParser, section: str) -> int:
    raw = config.get(section, "port")
    try:
        port = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid port: {raw!r}", field=f"{section}.port", value=raw
        ) from exc
    # 0 asks the OS for an ephemeral port
    if not 0 <= port <= 65535:
        raise ConfigurationError(
            f"Port out of range: {port}", field=f"{section}.port", value=port
        )
    return port


def get_server_config(config: configparser.ConfigParser) -> dict[str, Any]:
    """Get listener bind and body settings."""
    hosts = [h.strip() for h in config.get(SECTION_SERVER, "hosts").split(",")]
    hosts = [h for h in hosts if h]
    if not hosts:
        raise ConfigurationError(
            "At least one bind host is required", field="server.hosts", value=""
        )

    max_body_size = parse_size(config.get(SECTION_SERVER, "max_body_size"))
    if max_body_size < 0:
        raise ConfigurationError(
            "max_body_size must not be negative",
            field="server.max_body_size",
            value=max_body_size,
        )

    try:
        backlog = config.getint(SECTION_SERVER, "backlog")
    except ValueError as exc:
        raise ConfigurationError(
            "backlog must be an integer",
            field="server.backlog",
            value=config.get(SECTION_SERVER, "backlog"),
        ) from exc

    return {
        "port": _get_port(config, SECTION_SERVER),
        "hosts": hosts,
        "max_body_size": max_body_size,
        "backlog": backlog,
    }


def get_logging_config(config: configparser.ConfigParser) -> dict[str, Any]:
    """Get logging configuration."""
    level_name = config.get(SECTION_LOGGING, "log_level").strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        raise ConfigurationError(
            f"Unknown log level: {level_name}",
            field="logging.log_level",
            value=level_name,
        )
    log_format = config.get(SECTION_LOGGING, "log_format").strip().lower()
    if log_format not in LOG_FORMATS:
        raise ConfigurationError(
            f"log_format must be one of {', '.join(LOG_FORMATS)}",
            field="logging.log_format",
            value=log_format,
        )
    return {
        "log_level": level_name,
        "log_format": log_format,
        "log_file": config.get(SECTION_LOGGING, "log_file").strip(),
    }


def get_metrics_config(config: configparser.ConfigParser) -> dict[str, Any]:
    """Get prometheus exporter configuration."""
    return {
        "enabled": config.get(SECTION_METRICS, "enabled").strip().lower()
        in TRUE_VALUES,
        "host": config.get(SECTION_METRICS, "host").strip(),
        "port": _get_port(config, SECTION_METRICS),
    }
