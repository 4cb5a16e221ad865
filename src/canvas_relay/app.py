"""Main Litestar application for canvas-relay.

This module provides the application factory and the configured app
instance served by uvicorn.
"""

from __future__ import annotations

import os

from litestar import Litestar

from canvas_relay.core.logging import CorrelationIdMiddleware, configure_logging
from canvas_relay.plugin import RelayConfig, RelayPlugin


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable.

    Args:
        name: The variable name.
        default: Value used when the variable is unset.

    Returns:
        True for "true", "1" or "yes" (any case), otherwise False.
    """
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def create_app(
    *,
    debug: bool = False,
    json_logs: bool = False,
    config: RelayConfig | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        debug: Whether to enable debug mode and debug logging.
        json_logs: Whether to output logs as JSON (for production).
        config: Relay configuration. Defaults to RelayConfig().

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    return Litestar(
        plugins=[RelayPlugin(config or RelayConfig())],
        middleware=[CorrelationIdMiddleware],
        debug=debug,
    )


# Default application instance for uvicorn
# Use RELAY_DEBUG=true for dev mode, RELAY_JSON_LOGS=true for JSON output
app = create_app(debug=env_flag("RELAY_DEBUG"), json_logs=env_flag("RELAY_JSON_LOGS"))
