"""containerd controller driven through the ctr CLI.

Only container metadata is managed here. Running a container means
creating a task, which belongs to the tasks API and is not exposed.
"""

from __future__ import annotations

import json
from typing import Any

from src.infra.errors import PermissionDeniedError, TransportError, UnavailableError
from src.infra.shell.runner import CommandRunner

from .controller import ContainerInfo, CreateOptions, EngineController

DEFAULT_CTR_NAMESPACE = "default"


class ContainerdController(EngineController):
    """containerd containers via `ctr`.

    Args:
        namespace: containerd namespace (ctr's --namespace flag)
        runner: Command runner (a new one by default)
    """

    def __init__(
        self,
        namespace: str = DEFAULT_CTR_NAMESPACE,
        runner: CommandRunner | None = None,
    ) -> None:
        self._namespace = namespace
        self._runner = runner or CommandRunner()

    def _cmd(self, *args: str) -> list[str]:
        return ["ctr", "--namespace", self._namespace, *args]

    async def _run(self, *args: str) -> str:
        try:
            return await self._runner.run_checked(self._cmd(*args))
        except FileNotFoundError as e:
            raise UnavailableError("Binary not found: ctr", details=str(e)) from e
        except PermissionError as e:
            raise PermissionDeniedError("Permission denied running ctr", details=str(e)) from e
        except OSError as e:
            raise TransportError(f"Failed to run ctr {args[0]} {args[1]}", details=str(e)) from e

    async def list(self) -> list[ContainerInfo]:
        output = await self._run("containers", "list", "--quiet")
        ids = [line.strip() for line in output.splitlines() if line.strip()]
        return [ContainerInfo(id=cid, name=cid) for cid in ids]

    async def create(self, options: CreateOptions) -> ContainerInfo:
        args = ["containers", "create"]
        for key, value in options.env.items():
            args += ["--env", f"{key}={value}"]
        for key, value in options.labels.items():
            args += ["--label", f"{key}={value}"]
        args += [options.image, options.name, *options.command]

        await self._run(*args)
        return ContainerInfo(
            id=options.name, name=options.name, image=options.image, status="created"
        )

    async def inspect(self, container_id: str) -> ContainerInfo:
        output = await self._run("containers", "info", container_id)
        info: dict[str, Any] = json.loads(output) if output else {}
        return ContainerInfo(
            id=info.get("ID", container_id),
            name=info.get("ID", container_id),
            image=info.get("Image", ""),
            status="created",
            created=info.get("CreatedAt", ""),
            raw=info,
        )

    async def remove(self, container_id: str) -> None:
        await self._run("containers", "delete", container_id)
