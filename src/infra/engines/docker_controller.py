"""Docker Engine API controller (also serves Podman's compatible API)."""

from __future__ import annotations

import struct
from typing import Any
from urllib.parse import quote

import httpx

from src.infra.constants import DEFAULT_CONSTANTS

from .controller import ContainerInfo, CreateOptions, EngineController
from .http_api import UnixSocketApi

# Multiplexed log frame header: stream type, 3 padding bytes, big-endian length
_FRAME_HEADER = struct.Struct(">BxxxL")


def demux_log_stream(data: bytes) -> str:
    """Decode a Docker log payload.

    Containers without a TTY return frames prefixed with an 8-byte header;
    TTY containers return the raw stream. Both are handled.
    """
    if len(data) < _FRAME_HEADER.size or data[0] not in (0, 1, 2) or data[1:4] != b"\x00\x00\x00":
        return data.decode("utf-8", errors="replace")

    chunks: list[bytes] = []
    offset = 0
    while offset + _FRAME_HEADER.size <= len(data):
        _, length = _FRAME_HEADER.unpack_from(data, offset)
        offset += _FRAME_HEADER.size
        chunks.append(data[offset : offset + length])
        offset += length
    return b"".join(chunks).decode("utf-8", errors="replace")


def _container_from_summary(item: dict[str, Any]) -> ContainerInfo:
    names = item.get("Names") or []
    created = item.get("Created", "")
    return ContainerInfo(
        id=item.get("Id", ""),
        name=names[0].lstrip("/") if names else "",
        image=item.get("Image", ""),
        status=item.get("State", ""),
        created=str(created),
        raw=item,
    )


def _container_from_inspect(item: dict[str, Any]) -> ContainerInfo:
    return ContainerInfo(
        id=item.get("Id", ""),
        name=item.get("Name", "").lstrip("/"),
        image=(item.get("Config") or {}).get("Image", ""),
        status=(item.get("State") or {}).get("Status", ""),
        created=item.get("Created", ""),
        raw=item,
    )


class DockerController(EngineController):
    """Docker Engine REST API over its Unix socket.

    Example:
        async with DockerController() as docker:
            for container in await docker.list():
                print(container.name, container.status)
    """

    def __init__(
        self,
        socket_path: str = DEFAULT_CONSTANTS.DOCKER_SOCKET,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api = UnixSocketApi(socket_path, http_transport)
        self._prefix = f"/{DEFAULT_CONSTANTS.DOCKER_API_VERSION}/containers"

    def _url(self, container_id: str, suffix: str = "") -> str:
        return f"{self._prefix}/{quote(container_id, safe='')}{suffix}"

    async def aclose(self) -> None:
        await self._api.aclose()

    # =========================================================================
    # Operations
    # =========================================================================

    async def list(self) -> list[ContainerInfo]:
        items = await self._api.json("GET", f"{self._prefix}/json", params={"all": "true"})
        return [_container_from_summary(item) for item in items or []]

    async def create(self, options: CreateOptions) -> ContainerInfo:
        body: dict[str, Any] = {"Image": options.image}
        if options.command:
            body["Cmd"] = options.command
        if options.env:
            body["Env"] = [f"{key}={value}" for key, value in options.env.items()]
        if options.labels:
            body["Labels"] = options.labels

        created = await self._api.json(
            "POST", f"{self._prefix}/create", body, params={"name": options.name}
        )
        return ContainerInfo(
            id=created.get("Id", ""),
            name=options.name,
            image=options.image,
            status="created",
            raw=created,
        )

    async def inspect(self, container_id: str) -> ContainerInfo:
        item = await self._api.json("GET", self._url(container_id, "/json"))
        return _container_from_inspect(item)

    async def start(self, container_id: str) -> None:
        await self._api.request("POST", self._url(container_id, "/start"))

    async def stop(self, container_id: str) -> None:
        await self._api.request("POST", self._url(container_id, "/stop"))

    async def restart(self, container_id: str) -> None:
        await self._api.request("POST", self._url(container_id, "/restart"))

    async def remove(self, container_id: str) -> None:
        await self._api.request("DELETE", self._url(container_id))

    async def logs(self, container_id: str) -> str:
        response = await self._api.request(
            "GET",
            self._url(container_id, "/logs"),
            params={"stdout": "true", "stderr": "true"},
        )
        return demux_log_stream(response.content)


class PodmanController(DockerController):
    """Podman through its Docker-compatible REST API."""

    def __init__(
        self,
        socket_path: str = DEFAULT_CONSTANTS.PODMAN_SOCKETS[0],
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(socket_path, http_transport)
