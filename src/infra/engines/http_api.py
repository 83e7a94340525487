"""JSON-over-Unix-socket HTTP helper shared by the REST engine controllers."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import ProtocolError, TransportError


class UnixSocketApi:
    """Thin httpx wrapper that raises on non-success answers.

    Args:
        socket_path: Unix socket the engine listens on
        http_transport: httpx transport override, used in tests
    """

    def __init__(
        self,
        socket_path: str,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.socket_path = socket_path
        self._client = httpx.AsyncClient(
            transport=http_transport or httpx.AsyncHTTPTransport(uds=socket_path),
            base_url=DEFAULT_CONSTANTS.SOCKET_BASE_URL,
            timeout=None,
        )

    async def request(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and return the successful response.

        Raises:
            TransportError: If the socket cannot be reached
            ProtocolError: If the engine answers with a non-2xx status
        """
        logger.debug(f"{method} {url} via {self.socket_path}")
        try:
            response = await self._client.request(method, url, json=body, params=params)
        except httpx.TransportError as e:
            raise TransportError(
                f"{method} {url} failed on {self.socket_path}", details=str(e)
            ) from e

        if not response.is_success:
            raise ProtocolError(
                f"HTTP API error: {response.status_code} {response.reason_phrase}",
                response.status_code,
                details=response.text.strip() or None,
            )
        return response

    async def json(
        self,
        method: str,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON body (None for an empty body)."""
        response = await self.request(method, url, body, params)
        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()
