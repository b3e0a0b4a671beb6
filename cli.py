#!/usr/bin/env python3
"""Console entrypoint: delegates to the package CLI."""

from __future__ import annotations

from payload_listener.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
