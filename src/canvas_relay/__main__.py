"""Run the relay with uvicorn: ``python -m canvas_relay``."""

from __future__ import annotations

import os

import structlog
import uvicorn

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

logger = structlog.get_logger(__name__)


def main() -> None:
    """Serve the relay on RELAY_HOST:RELAY_PORT."""
    host = os.environ.get("RELAY_HOST", DEFAULT_HOST)
    port = int(os.environ.get("RELAY_PORT", DEFAULT_PORT))

    from canvas_relay.app import app

    logger.info("Starting canvas relay", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_level="warning")


if __name__ == "__main__":
    main()
