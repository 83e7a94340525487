"""Lifecycle client that speaks HTTP to an engine over a Unix socket."""

from __future__ import annotations

import httpx
from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import TransportError
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import HttpRequestSpec
from src.infra.shell.types import CommandResult

from .types import LifecycleClient, SocketTransport


class SocketLifecycleClient(LifecycleClient):
    """Lifecycle client bound to one socket candidate.

    Request descriptors come from the candidate's operation table. Builders
    registered as unsupported raise UnsupportedOperationError before any
    I/O happens. A non-2xx answer is returned as a failed CommandResult with
    the status code preserved; only I/O failures raise TransportError.

    Example:
        async with SocketLifecycleClient(identity, transport) as client:
            result = await client.status("web")
    """

    def __init__(
        self,
        identity: RuntimeIdentity,
        transport: SocketTransport,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            identity: Runtime being managed
            transport: Bound socket transport
            http_transport: httpx transport override (a Unix-socket transport
                            on the bound path by default)
        """
        super().__init__(identity)
        self._transport = transport
        self._operations = transport.candidate.operations
        self._http = httpx.AsyncClient(
            transport=http_transport or httpx.AsyncHTTPTransport(uds=transport.path),
            base_url=DEFAULT_CONSTANTS.SOCKET_BASE_URL,
            timeout=None,
        )

    @property
    def transport(self) -> SocketTransport:
        return self._transport

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _send(self, request: HttpRequestSpec) -> CommandResult:
        logger.debug(f"{request.method} {request.url} via {self._transport.path}")
        try:
            response = await self._http.request(
                request.method,
                request.url,
                json=request.body,
            )
        except httpx.TransportError as e:
            raise TransportError(
                f"{request.method} {request.url} failed on {self._transport.path}",
                details=str(e),
            ) from e

        success = response.is_success
        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return CommandResult(
            success=success,
            stdout=response.content,
            returncode=0 if success else response.status_code,
            status_code=response.status_code,
        )

    # =========================================================================
    # Operations
    # =========================================================================

    async def status(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.status(container_id))

    async def start(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.start(container_id))

    async def stop(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.stop(container_id))

    async def create(self, container_id: str, image: str) -> CommandResult:
        return await self._send(self._operations.create(container_id, image))

    async def list(self) -> CommandResult:
        return await self._send(self._operations.list())

    async def inspect(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.inspect(container_id))

    async def restart(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.restart(container_id))

    async def remove(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.remove(container_id))

    async def logs(self, container_id: str) -> CommandResult:
        return await self._send(self._operations.logs(container_id))
