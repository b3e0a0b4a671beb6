"""Configuration constants and defaults.

This module contains all default configuration values and constants used
throughout the configuration system.
"""

# Section names
SECTION_SERVER = "server"
SECTION_LOGGING = "logging"
SECTION_METRICS = "metrics"

# Environment variable prefix: LISTENER_<SECTION>_<KEY>
ENV_PREFIX = "LISTENER_"

# Meta-configuration
ENV_LISTENER_CONFIG = "LISTENER_CONFIG"
DEFAULT_CONFIG_FILE = "config/listener.conf"

DEFAULT_PORT = 8888
DEFAULT_HOSTS = ("0.0.0.0", "::")

# Default values
DEFAULTS = {
    SECTION_SERVER: {
        "port": str(DEFAULT_PORT),
        "hosts": ",".join(DEFAULT_HOSTS),
        # 0 keeps bodies unbounded
        "max_body_size": "0",
        "backlog": "128",
    },
    SECTION_LOGGING: {
        "log_level": "INFO",
        "log_format": "text",
        "log_file": "",
    },
    SECTION_METRICS: {
        "enabled": "false",
        "host": "",
        "port": "9888",
    },
}

LOG_FORMATS = ("text", "json")
TRUE_VALUES = ("1", "true", "yes", "on")
