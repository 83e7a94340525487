"""Kr8s-based controller for Kubernetes pods.

Uses the kr8s library for native async Kubernetes operations. A pod has
no separate start or restart; it runs once scheduled and is replaced by
its owner when deleted.
"""

from __future__ import annotations

from typing import Any

import kr8s
from kr8s.asyncio.objects import Pod

from src.infra.errors import ProtocolError

from .controller import ContainerInfo, CreateOptions, EngineController
from .helpers import get_namespace


def _pod_info(pod: Any) -> ContainerInfo:
    metadata = pod.metadata
    spec = pod.spec
    status = pod.raw.get("status") or {}
    containers = spec.get("containers", [])
    return ContainerInfo(
        id=metadata.get("uid", "") or metadata.get("name", ""),
        name=metadata.get("name", ""),
        image=containers[0].get("image", "") if containers else "",
        status=status.get("phase", "Unknown"),
        created=metadata.get("creationTimestamp", "") or "",
        raw=dict(pod.raw),
    )


def _protocol_error(action: str, name: str, error: Exception) -> ProtocolError:
    if isinstance(error, kr8s.NotFoundError):
        return ProtocolError(f"Pod {name} not found while trying to {action}", 404, str(error))
    response = getattr(error, "response", None)
    status = getattr(response, "status_code", None) or 500
    return ProtocolError(f"Failed to {action} pod {name}", status, str(error))


class Kr8sKubernetesController(EngineController):
    """Kubernetes pod controller using the kr8s library.

    The kr8s API client is NOT cached because it is tied to the event loop
    that was running when it was created.
    """

    def __init__(self, namespace: str | None = None) -> None:
        self._namespace = namespace or get_namespace()

    @property
    def namespace(self) -> str:
        return self._namespace

    async def _get_api(self) -> Any:  # Returns kr8s._api.Api
        return await kr8s.asyncio.api()

    async def _get_pod(self, name: str, action: str) -> Any:
        api = await self._get_api()
        try:
            return await Pod.get(name, namespace=self._namespace, api=api)
        except (kr8s.NotFoundError, kr8s.ServerError) as e:
            raise _protocol_error(action, name, e) from e

    # =========================================================================
    # Operations
    # =========================================================================

    async def list(self) -> list[ContainerInfo]:
        api = await self._get_api()
        try:
            return [
                _pod_info(pod)
                async for pod in Pod.list(namespace=self._namespace, api=api)
            ]
        except kr8s.ServerError as e:
            raise _protocol_error("list", self._namespace, e) from e

    async def create(self, options: CreateOptions) -> ContainerInfo:
        container: dict[str, Any] = {"name": options.name, "image": options.image}
        if options.command:
            container["command"] = options.command
        if options.env:
            container["env"] = [{"name": k, "value": v} for k, v in options.env.items()]

        manifest: dict[str, Any] = {
            "apiVersion": "v1",
            "kind": "Pod",
            "metadata": {"name": options.name, "namespace": self._namespace},
            "spec": {"containers": [container]},
        }
        if options.labels:
            manifest["metadata"]["labels"] = options.labels

        api = await self._get_api()
        pod = Pod(manifest, namespace=self._namespace, api=api)
        try:
            await pod.create()
        except kr8s.ServerError as e:
            raise _protocol_error("create", options.name, e) from e
        return _pod_info(pod)

    async def inspect(self, container_id: str) -> ContainerInfo:
        return _pod_info(await self._get_pod(container_id, "inspect"))

    async def stop(self, container_id: str) -> None:
        """Delete the pod; its owner, if any, schedules a replacement."""
        pod = await self._get_pod(container_id, "stop")
        try:
            await pod.delete()
        except kr8s.ServerError as e:
            raise _protocol_error("stop", container_id, e) from e

    async def remove(self, container_id: str) -> None:
        await self.stop(container_id)

    async def logs(self, container_id: str) -> str:
        pod = await self._get_pod(container_id, "fetch logs of")
        try:
            lines = [line async for line in pod.logs()]
        except kr8s.ServerError as e:
            raise _protocol_error("fetch logs of", container_id, e) from e
        return "\n".join(lines)
