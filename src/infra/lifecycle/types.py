"""Lifecycle client contract and transport types.

Defines the uniform operation set every lifecycle client exposes and the
transport a client is bound to. Callers only ever see LifecycleClient;
the concrete variant (CLI, socket, no-op) is an implementation detail of
the factory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import SocketCandidate
from src.infra.shell.types import CommandResult

# =============================================================================
# Transports
# =============================================================================


class TransportKind(str, Enum):
    """How a client reaches its engine."""

    CLI = "cli"
    SOCKET = "socket"
    NONE = "none"  # host platform, nothing to reach


@dataclass(frozen=True)
class CliTransport:
    """Reach the engine through an installed CLI binary."""

    binary: str

    @property
    def kind(self) -> TransportKind:
        return TransportKind.CLI

    def describe(self) -> str:
        return f"cli:{self.binary}"


@dataclass(frozen=True)
class SocketTransport:
    """Reach the engine through HTTP over a Unix domain socket."""

    candidate: SocketCandidate

    @property
    def kind(self) -> TransportKind:
        return TransportKind.SOCKET

    @property
    def path(self) -> str:
        return self.candidate.path

    def describe(self) -> str:
        return f"socket:{self.path}"


TransportCandidate = CliTransport | SocketTransport


# =============================================================================
# Client contract
# =============================================================================


class LifecycleClient(ABC):
    """Uniform container lifecycle operations bound to one transport.

    A client never switches transport after construction. It holds no
    state between calls beyond its transport handle, so a failed call does
    not affect later ones and concurrent calls on different containers are
    safe. Ordering (create before start) is the caller's concern.

    Every operation returns a CommandResult. An engine-level rejection is
    a result with success=False, not an exception; inspect the flag.
    """

    def __init__(self, identity: RuntimeIdentity) -> None:
        self._identity = identity

    @property
    def identity(self) -> RuntimeIdentity:
        """The runtime this client manages."""
        return self._identity

    @property
    @abstractmethod
    def transport(self) -> TransportCandidate | None:
        """Bound transport, or None for the host no-op client."""
        ...

    @property
    def transport_kind(self) -> TransportKind:
        transport = self.transport
        return transport.kind if transport is not None else TransportKind.NONE

    # =========================================================================
    # Core operations
    # =========================================================================

    @abstractmethod
    async def status(self, container_id: str) -> CommandResult:
        """Query the status of a container.

        Args:
            container_id: Container ID or name

        Returns:
            CommandResult with the engine's raw answer
        """
        ...

    @abstractmethod
    async def start(self, container_id: str) -> CommandResult:
        """Start a container by ID or name."""
        ...

    @abstractmethod
    async def stop(self, container_id: str) -> CommandResult:
        """Stop a container by ID or name."""
        ...

    @abstractmethod
    async def create(self, container_id: str, image: str) -> CommandResult:
        """Create a container named container_id from an image.

        Args:
            container_id: Name to give the new container
            image: Image reference (e.g., "nginx:latest")

        Returns:
            CommandResult with the engine's raw answer

        Raises:
            UnsupportedOperationError: If the engine cannot create containers
                                       through this transport
        """
        ...

    # =========================================================================
    # Extended operations
    # =========================================================================

    @abstractmethod
    async def list(self) -> CommandResult:
        """List all containers, running and stopped."""
        ...

    @abstractmethod
    async def inspect(self, container_id: str) -> CommandResult:
        """Fetch detailed information about a container."""
        ...

    @abstractmethod
    async def restart(self, container_id: str) -> CommandResult:
        """Restart a container by ID or name."""
        ...

    @abstractmethod
    async def remove(self, container_id: str) -> CommandResult:
        """Remove a container by ID or name."""
        ...

    @abstractmethod
    async def logs(self, container_id: str) -> CommandResult:
        """Fetch the combined stdout/stderr log of a container."""
        ...

    async def aclose(self) -> None:  # noqa: B027
        """Release the transport handle. No-op unless the transport holds one."""

    async def __aenter__(self) -> LifecycleClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
