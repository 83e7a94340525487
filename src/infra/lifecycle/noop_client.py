"""No-op lifecycle client for the bare host platform."""

from __future__ import annotations

from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.shell.types import CommandResult

from .types import LifecycleClient

_NEUTRAL = CommandResult(success=True)


class NoopLifecycleClient(LifecycleClient):
    """Client for a host with no container engine.

    There is nothing to manage, so every operation succeeds with an empty
    result and performs no I/O.
    """

    def __init__(self, identity: RuntimeIdentity = RuntimeIdentity.HOST) -> None:
        super().__init__(identity)

    @property
    def transport(self) -> None:
        return None

    async def status(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def start(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def stop(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def create(self, container_id: str, image: str) -> CommandResult:
        return _NEUTRAL

    async def list(self) -> CommandResult:
        return _NEUTRAL

    async def inspect(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def restart(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def remove(self, container_id: str) -> CommandResult:
        return _NEUTRAL

    async def logs(self, container_id: str) -> CommandResult:
        return _NEUTRAL
