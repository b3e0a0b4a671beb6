"""
Configuration management for the payload listener.

Thin wrapper over a ConfigParser built by the loader; getters return
validated dicts.
"""

import configparser
import logging
import os
import sys
from typing import Any

from payload_listener.utils.logger import configure as configure_logging
from payload_listener.utils.logger import get_logger

from .constants import DEFAULT_CONFIG_FILE, ENV_LISTENER_CONFIG
from .getters import get_logging_config, get_metrics_config, get_server_config
from .loader import load_config

logger = get_logger(__name__)


class ListenerConfig:
    """Listener configuration manager."""

    def __init__(self, config_file: str | None = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to an INI file. Falls back to $LISTENER_CONFIG,
                then config/listener.conf. A missing file means defaults.
        """
        self.config_file = (
            config_file or os.environ.get(ENV_LISTENER_CONFIG) or DEFAULT_CONFIG_FILE
        )
        self.config: configparser.ConfigParser = load_config(self.config_file)
        # Validate eagerly so a bad value fails at startup
        self.get_server_config()
        self.get_logging_config()
        self.get_metrics_config()

    def set_value(self, section: str, key: str, value: Any) -> None:
        """Override a single value, e.g. from command-line flags."""
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, key, str(value))

    def get_server_config(self) -> dict[str, Any]:
        """Get listener bind and body settings."""
        return get_server_config(self.config)

    def get_logging_config(self) -> dict[str, Any]:
        """Get logging configuration."""
        return get_logging_config(self.config)

    def get_metrics_config(self) -> dict[str, Any]:
        """Get prometheus exporter configuration."""
        return get_metrics_config(self.config)


def setup_logging(config: ListenerConfig) -> None:
    """Setup logging based on configuration."""
    log_config = config.get_logging_config()
    log_file = log_config["log_file"]
    log_level = getattr(logging, log_config["log_level"], logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    configure_logging(
        level=log_level,
        handlers=handlers,
        json_output=log_config["log_format"] == "json",
    )
    logger.debug(
        "Logging configured: level=%s, format=%s, file=%s",
        log_config["log_level"],
        log_config["log_format"],
        log_file or "console-only",
    )
