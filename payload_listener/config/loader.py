"""Configuration loading.

Load order: config file -> environment variables -> defaults.
Environment variables win over the file; defaults fill whatever is left.
"""

import configparser
import os

from payload_listener.exceptions import ConfigurationError
from payload_listener.utils.logger import get_logger

from .constants import DEFAULTS, ENV_PREFIX

logger = get_logger(__name__)


def env_var_name(section: str, key: str) -> str:
    """Return the environment variable overriding ``section.key``."""
    return f"{ENV_PREFIX}{section.upper()}_{key.upper()}"


def populate_defaults(config: configparser.ConfigParser) -> None:
    """Fill sections and keys missing from ``config`` with defaults."""
    for section, values in DEFAULTS.items():
        if not config.has_section(section):
            config.add_section(section)
        for key, value in values.items():
            if not config.has_option(section, key):
                config.set(section, key, value)


def apply_env_overrides(config: configparser.ConfigParser) -> None:
    """Overwrite known keys from LISTENER_<SECTION>_<KEY> environment variables."""
    for section, values in DEFAULTS.items():
        for key in values:
            env_var = env_var_name(section, key)
            value = os.environ.get(env_var)
            if value is None:
                continue
            if not config.has_section(section):
                config.add_section(section)
            config.set(section, key, value)
            logger.debug(
                "Applied environment override for config key",
                event="listener.config.env_override_applied",
                section=section,
                key=key,
                env_var=env_var,
            )


def load_config(source: str | None) -> configparser.ConfigParser:
    """Build a ConfigParser from ``source`` (optional), environment and defaults."""
    config = configparser.ConfigParser(interpolation=None)
    if source and os.path.exists(source):
        try:
            with open(source, encoding="utf-8") as fh:
                config.read_file(fh)
        except configparser.Error as exc:
            raise ConfigurationError(
                f"Cannot parse configuration file {source}: {exc}", value=source
            ) from exc
        logger.debug("Read configuration file %s", source)
    elif source:
        logger.debug("Configuration file %s not found; using defaults", source)

    apply_env_overrides(config)
    populate_defaults(config)
    return config


def parse_size(size_str: str) -> int:
    """Parse human readable size strings like '10MB' -> bytes.

    Examples:
        >>> parse_size('10MB')
        10485760
        >>> parse_size('512')
        512
    """
    s = size_str.strip().upper()
    try:
        if s.endswith("KB"):
            return int(float(s[:-2]) * 1024)
        if s.endswith("MB"):
            return int(float(s[:-2]) * 1024 * 1024)
        if s.endswith("GB"):
            return int(float(s[:-2]) * 1024 * 1024 * 1024)
        return int(s)
    except (ValueError, OverflowError) as exc:
        raise ConfigurationError(
            f"Invalid size value: {size_str!r}", value=size_str
        ) from exc
