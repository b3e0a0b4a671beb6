from __future__ import annotations

import asyncio

from payload_listener.config import ListenerConfig, setup_logging
from payload_listener.server import ListenerServer
from payload_listener.utils import metrics
from payload_listener.utils.logger import get_logger
from payload_listener.web import create_app

logger = get_logger(__name__)


def build_server(cfg: ListenerConfig) -> ListenerServer:
    """Create the app and the server object from configuration."""
    server_cfg = cfg.get_server_config()
    app = create_app(max_body_size=server_cfg["max_body_size"])
    return ListenerServer(
        app,
        port=server_cfg["port"],
        hosts=server_cfg["hosts"],
        backlog=server_cfg["backlog"],
    )


def main(cfg: ListenerConfig | None = None) -> int:
    cfg = cfg or ListenerConfig()
    setup_logging(cfg)

    server = build_server(cfg)
    metrics_cfg = cfg.get_metrics_config()
    try:
        server.bind_all()
        if metrics_cfg["enabled"]:
            metrics.start_exporter(metrics_cfg["port"], metrics_cfg["host"])
        asyncio.run(server.serve())
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
