"""LXD REST API controller over the LXD Unix socket."""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import quote

import httpx

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import ProtocolError

from .controller import ContainerInfo, CreateOptions, EngineController
from .http_api import UnixSocketApi

# Seconds LXD waits for a graceful stop before forcing it
STATE_CHANGE_TIMEOUT = 30


def default_lxd_socket() -> str:
    """First existing LXD socket, or the snap location when none exists."""
    for path in DEFAULT_CONSTANTS.LXD_SOCKETS:
        if os.path.exists(path):
            return path
    return DEFAULT_CONSTANTS.LXD_SOCKETS[0]


def _instance_info(meta: dict[str, Any]) -> ContainerInfo:
    config = meta.get("config") or {}
    return ContainerInfo(
        id=meta.get("name", ""),
        name=meta.get("name", ""),
        image=config.get("image.description", ""),
        status=meta.get("status", ""),
        created=meta.get("created_at", ""),
        raw=meta,
    )


class LxdController(EngineController):
    """LXD instances through the REST API.

    Mutating requests return background operations; each one is awaited
    through the operation's /wait endpoint so that a method returns only
    once LXD has finished.
    """

    def __init__(
        self,
        socket_path: str | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api = UnixSocketApi(socket_path or default_lxd_socket(), http_transport)
        self._prefix = f"/{DEFAULT_CONSTANTS.LXD_API_VERSION}/instances"

    def _url(self, name: str, suffix: str = "") -> str:
        return f"{self._prefix}/{quote(name, safe='')}{suffix}"

    async def aclose(self) -> None:
        await self._api.aclose()

    async def _wait(self, answer: dict[str, Any] | None) -> dict[str, Any]:
        """Block until a background operation finishes; raise if it failed."""
        if not answer or answer.get("type") != "async" or not answer.get("operation"):
            return answer or {}

        result = await self._api.json("GET", f"{answer['operation']}/wait")
        meta = (result or {}).get("metadata") or {}
        status_code = meta.get("status_code", 200)
        if status_code >= 400:
            raise ProtocolError(
                f"LXD operation failed: {meta.get('status', 'Failure')}",
                status_code,
                details=meta.get("err") or None,
            )
        return result

    async def _change_state(self, name: str, action: str) -> None:
        answer = await self._api.json(
            "PUT",
            self._url(name, "/state"),
            {"action": action, "timeout": STATE_CHANGE_TIMEOUT},
        )
        await self._wait(answer)

    # =========================================================================
    # Operations
    # =========================================================================

    async def list(self) -> list[ContainerInfo]:
        answer = await self._api.json("GET", self._prefix, params={"recursion": "1"})
        return [_instance_info(meta) for meta in (answer or {}).get("metadata") or []]

    async def create(self, options: CreateOptions) -> ContainerInfo:
        body: dict[str, Any] = {
            "name": options.name,
            "source": {"type": "image", "alias": options.image},
        }
        config = {f"environment.{key}": value for key, value in options.env.items()}
        config.update({f"user.{key}": value for key, value in options.labels.items()})
        if config:
            body["config"] = config

        await self._wait(await self._api.json("POST", self._prefix, body))
        return ContainerInfo(
            id=options.name,
            name=options.name,
            image=options.image,
            status="Stopped",
        )

    async def inspect(self, container_id: str) -> ContainerInfo:
        answer = await self._api.json("GET", self._url(container_id))
        return _instance_info((answer or {}).get("metadata") or {})

    async def start(self, container_id: str) -> None:
        await self._change_state(container_id, "start")

    async def stop(self, container_id: str) -> None:
        await self._change_state(container_id, "stop")

    async def restart(self, container_id: str) -> None:
        await self._change_state(container_id, "restart")

    async def remove(self, container_id: str) -> None:
        await self._wait(await self._api.json("DELETE", self._url(container_id)))

    async def logs(self, container_id: str) -> str:
        response = await self._api.request("GET", self._url(container_id, "/logs/lxc.log"))
        return response.text
