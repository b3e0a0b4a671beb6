"""Listener configuration package.

- INI file loading with environment variable overrides
- Validated getters per section
"""

from .config import ListenerConfig, setup_logging
from .constants import *

__all__ = [
    "ListenerConfig",
    "setup_logging",
]
