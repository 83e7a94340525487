"""Factory for obtaining a lifecycle client bound to the resolved transport."""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from src.infra.config.config_data import BridgeSettings
from src.infra.permissions.prober import PermissionProber
from src.infra.runtimes.detector import detect
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.shell.runner import CommandRunner

from .cli_client import CliLifecycleClient
from .noop_client import NoopLifecycleClient
from .resolver import Resolution, TransportResolver
from .socket_client import SocketLifecycleClient
from .types import CliTransport, LifecycleClient, SocketTransport


class LifecycleClientFactory:
    """Wire prober, resolver and runner into lifecycle clients.

    Each call to create() resolves from scratch; nothing is cached.

    Example:
        factory = LifecycleClientFactory(load_settings())
        async with await factory.create(RuntimeIdentity.DOCKER) as client:
            result = await client.status("web")
    """

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        prober: PermissionProber | None = None,
        runner: CommandRunner | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._settings = settings or BridgeSettings()
        self._prober = prober or PermissionProber(
            allow_subprocess=self._settings.allow_subprocess
        )
        self._runner = runner or CommandRunner()
        self._environ = environ
        self._resolver = TransportResolver(
            self._prober,
            probe_args=self._settings.probe_args,
            environ=environ,
        )

    @property
    def settings(self) -> BridgeSettings:
        return self._settings

    @property
    def resolver(self) -> TransportResolver:
        return self._resolver

    def build(self, resolution: Resolution) -> LifecycleClient:
        """Construct the client variant for an already-made resolution."""
        transport = resolution.transport
        if transport is None:
            return NoopLifecycleClient(resolution.identity)
        if isinstance(transport, CliTransport):
            return CliLifecycleClient(
                resolution.identity,
                transport,
                self._prober,
                runner=self._runner,
                preflight=self._settings.preflight,
            )
        if isinstance(transport, SocketTransport):
            return SocketLifecycleClient(resolution.identity, transport)
        raise TypeError(f"Unknown transport: {transport!r}")

    async def create(self, identity: RuntimeIdentity | None = None) -> LifecycleClient:
        """Resolve a transport and return a client bound to it.

        Args:
            identity: Runtime to manage; detected (or taken from settings)
                      when omitted

        Returns:
            LifecycleClient bound to exactly one transport

        Raises:
            PermissionDeniedError: If subprocess permission is not granted
            RuntimeUnreachableError: If neither the binary nor a socket is usable
        """
        if identity is None:
            identity = detect(self._settings.runtime, self._environ).identity

        resolution = await self._resolver.resolve(identity)
        client = self.build(resolution)
        logger.debug(f"Built {type(client).__name__} for {resolution.describe()}")
        return client


async def resolve(
    identity: RuntimeIdentity,
    settings: BridgeSettings | None = None,
) -> LifecycleClient:
    """Resolve a lifecycle client for a runtime with default collaborators.

    Args:
        identity: Runtime to manage
        settings: Optional settings (defaults when omitted)

    Returns:
        LifecycleClient bound to the resolved transport
    """
    return await LifecycleClientFactory(settings).create(identity)
