"""HTTP listener that logs JSON payloads posted to it and acknowledges with 204."""

__version__ = "0.1.0"
