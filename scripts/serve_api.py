#!/usr/bin/env python
"""
scripts/serve_api.py

Runs the REST API until SIGINT/SIGTERM.

Usage:
    python -m scripts.serve_api [--address HOST:PORT] [--log-level LEVEL]
"""
from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from concurrent.futures import Future

logger = logging.getLogger("serve_api")


def main(address: str | None = None, log_level: str | None = None) -> int:
    """Serve the REST API; returns the process exit code."""
    from prometheus_client import REGISTRY

    from src.api.main import create_app
    from src.api.metrics import ApiMetrics
    from src.api.server import ApiServer, ApiServerError
    from src.config import get_settings
    from src.stores.registry import Stores

    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    app = create_app(Stores(), ApiMetrics(REGISTRY))
    stop = threading.Event()
    stopped: Future = Future()

    def _request_stop(signum, frame) -> None:
        logger.info("Received %s", signal.Signals(signum).name)
        stop.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    try:
        server = ApiServer(
            app,
            address or settings.api_address,
            access_log=settings.access_log,
            startup_timeout=settings.startup_timeout,
            shutdown_timeout=settings.shutdown_timeout,
        )
        server.run(stop, stopped)
    except ApiServerError as exc:
        logger.error("Exiting: %s", exc)
        return 1

    if stopped.result():
        logger.info("Done.")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Serve the railfeed REST API")
    parser.add_argument("--address", default=None, help="Listen address (host:port)")
    parser.add_argument("--log-level", default=None, help="Log level (DEBUG, INFO, ...)")
    args = parser.parse_args()

    sys.exit(main(args.address, args.log_level))
