#!/usr/bin/env python3
"""
Package CLI entrypoint used by the 'payload-listener' console script.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from payload_listener.config import ListenerConfig
from payload_listener.config.constants import SECTION_LOGGING, SECTION_SERVER
from payload_listener.exceptions import ListenerError
from payload_listener.utils.logger import configure, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payload-listener",
        description="Log JSON payloads sent to this HTTP listener and answer 204.",
    )
    parser.add_argument("--config", help="path to an INI configuration file")
    parser.add_argument("--port", type=int, help="TCP port to bind (default 8888)")
    parser.add_argument(
        "--host",
        action="append",
        dest="hosts",
        metavar="ADDR",
        help="address to bind; repeat for several (default 0.0.0.0 and ::)",
    )
    parser.add_argument(
        "--max-body-size", help="reject bodies above this size, e.g. 1MB (0 = no cap)"
    )
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return parser


def load_config(args: argparse.Namespace) -> ListenerConfig:
    """Load configuration and apply command-line overrides on top."""
    cfg = ListenerConfig(args.config)
    if args.port is not None:
        cfg.set_value(SECTION_SERVER, "port", args.port)
    if args.hosts:
        cfg.set_value(SECTION_SERVER, "hosts", ",".join(args.hosts))
    if args.max_body_size is not None:
        cfg.set_value(SECTION_SERVER, "max_body_size", args.max_body_size)
    if args.log_level:
        cfg.set_value(SECTION_LOGGING, "log_level", args.log_level)
    # Re-validate with overrides applied
    cfg.get_server_config()
    cfg.get_logging_config()
    return cfg


def main(argv: Sequence[str] | None = None) -> int:
    configure()
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config(args)
        from . import main as pkg_main

        return pkg_main.main(cfg)
    except ListenerError as exc:
        logger.error("Could not start payload-listener: %s", exc.message)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
