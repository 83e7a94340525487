"""Typed engine controller interface.

Where a lifecycle client returns the engine's raw answer, an engine
controller parses it into ContainerInfo objects. Controllers are bound to
a specific engine API and do not perform transport resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.infra.errors import UnsupportedOperationError

# =============================================================================
# Data Types
# =============================================================================


@dataclass
class ContainerInfo:
    """Engine-neutral view of one container, pod or instance."""

    id: str
    name: str = ""
    image: str = ""
    status: str = ""
    created: str = ""
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class CreateOptions:
    """Parameters for creating a container."""

    name: str
    image: str
    command: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)


# =============================================================================
# Base Controller
# =============================================================================


class EngineController:
    """Base class for typed engine controllers.

    Every operation raises UnsupportedOperationError until a subclass
    overrides it, so engines only implement what they can serve.
    Non-success answers from the engine raise ProtocolError.
    """

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{type(self).__name__}.{operation} is not implemented by this engine"
        )

    async def list(self) -> list[ContainerInfo]:
        """List all containers, running and stopped."""
        raise self._unsupported("list")

    async def create(self, options: CreateOptions) -> ContainerInfo:
        """Create a container and return what is known about it."""
        raise self._unsupported("create")

    async def inspect(self, container_id: str) -> ContainerInfo:
        """Fetch a single container by ID or name."""
        raise self._unsupported("inspect")

    async def start(self, container_id: str) -> None:
        raise self._unsupported("start")

    async def stop(self, container_id: str) -> None:
        raise self._unsupported("stop")

    async def restart(self, container_id: str) -> None:
        raise self._unsupported("restart")

    async def remove(self, container_id: str) -> None:
        raise self._unsupported("remove")

    async def logs(self, container_id: str) -> str:
        """Fetch combined stdout/stderr of a container."""
        raise self._unsupported("logs")

    async def aclose(self) -> None:
        """Release any held connection. No-op by default."""

    async def __aenter__(self) -> EngineController:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
