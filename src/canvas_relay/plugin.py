"""Litestar plugin for canvas-relay integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from canvas_relay.realtime.handler import create_relay_handler
from canvas_relay.realtime.registry import ConnectionRegistry

if TYPE_CHECKING:
    from litestar.config.app import AppConfig


@dataclass
class RelayConfig:
    """Configuration for the relay plugin.

    Attributes:
        ws_path: Path of the relay WebSocket endpoint. Defaults to "/room".
        enable_health: Whether to mount the /health and /ready endpoints.
            Defaults to True.
        registry: Optional pre-built ConnectionRegistry. If None, a new one
            is created when the application starts.

    Example:
        >>> config = RelayConfig(ws_path="/canvas", registry=ConnectionRegistry())
    """

    ws_path: str = "/room"
    enable_health: bool = True
    registry: ConnectionRegistry | None = field(default=None)


class RelayPlugin(InitPluginProtocol):
    """Litestar plugin that mounts the canvas relay.

    The plugin owns the application's single ConnectionRegistry, exposes it
    through dependency injection under the ``registry`` key and mounts the
    relay WebSocket route.

    Example:
        >>> from litestar import Litestar
        >>> from canvas_relay import RelayConfig, RelayPlugin
        >>>
        >>> app = Litestar(plugins=[RelayPlugin(RelayConfig(ws_path="/room"))])
    """

    def __init__(self, config: RelayConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, RelayConfig with default
                values will be used.
        """
        self._config = config or RelayConfig()
        self._registry: ConnectionRegistry | None = None

    @property
    def registry(self) -> ConnectionRegistry | None:
        """The registry in use, or None before the app is initialized."""
        return self._registry

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Register the registry dependency and mount the relay routes.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        self._registry = self._config.registry or ConnectionRegistry()

        def provide_registry() -> ConnectionRegistry:
            """Dependency provider for ConnectionRegistry."""
            if self._registry is None:
                msg = "Connection registry not initialized"
                raise RuntimeError(msg)
            return self._registry

        app_config.dependencies["registry"] = Provide(provide_registry, sync_to_thread=False)

        app_config.route_handlers.append(create_relay_handler(path=self._config.ws_path, registry=self._registry))

        if self._config.enable_health:
            from canvas_relay.web.health import HealthController

            app_config.route_handlers.append(HealthController)

        return app_config
