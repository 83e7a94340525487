"""Unit tests for SocketLifecycleClient."""

from __future__ import annotations

import json
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.infra.errors import TransportError, UnsupportedOperationError
from src.infra.lifecycle.resolver import TransportResolver
from src.infra.lifecycle.socket_client import SocketLifecycleClient
from src.infra.lifecycle.types import SocketTransport, TransportKind
from src.infra.permissions.types import PermissionState, PermissionVerdict
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import socket_candidates


def _transport(identity: RuntimeIdentity, index: int = 0) -> SocketTransport:
    return SocketTransport(socket_candidates(identity, environ={})[index])


def _client(
    identity: RuntimeIdentity,
    handler: Callable[[httpx.Request], httpx.Response],
    index: int = 0,
) -> SocketLifecycleClient:
    return SocketLifecycleClient(
        identity, _transport(identity, index), http_transport=httpx.MockTransport(handler)
    )


def _no_io(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.method} {request.url}")


class TestDockerSocket:
    """Tests for the Docker Engine API socket client."""

    async def test_resolved_socket_create_builds_docker_request(
        self, mock_prober: MagicMock
    ) -> None:
        """Test docker without CLI binds the socket and create posts the image."""
        mock_prober.probe_subprocess_capability = AsyncMock(
            return_value=PermissionVerdict(name="docker", state=PermissionState.UNAVAILABLE)
        )
        mock_prober.probe_read_permissions = AsyncMock(
            return_value=[
                PermissionVerdict(
                    name="read", state=PermissionState.GRANTED, path="/var/run/docker.sock"
                )
            ]
        )
        resolution = await TransportResolver(mock_prober).resolve(RuntimeIdentity.DOCKER)
        assert isinstance(resolution.transport, SocketTransport)
        assert resolution.transport.path == "/var/run/docker.sock"

        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"Id": "deadbeef", "Warnings": []})

        async with SocketLifecycleClient(
            RuntimeIdentity.DOCKER,
            resolution.transport,
            http_transport=httpx.MockTransport(handler),
        ) as client:
            result = await client.create("abc", "nginx:latest")

        assert client.transport_kind is TransportKind.SOCKET
        (request,) = seen
        assert request.method == "POST"
        assert request.url.path == "/containers/create"
        assert request.url.params["name"] == "abc"
        assert json.loads(request.content) == {"Image": "nginx:latest"}
        assert result.success is True
        assert result.returncode == 0
        assert result.status_code == 201
        assert json.loads(result.stdout)["Id"] == "deadbeef"

    async def test_non_2xx_is_failed_result_not_exception(self) -> None:
        """Test an engine rejection keeps the status code and does not raise."""
        client = _client(
            RuntimeIdentity.DOCKER,
            lambda request: httpx.Response(404, json={"message": "No such container: abc"}),
        )

        result = await client.status("abc")

        assert result.success is False
        assert result.status_code == 404
        assert result.returncode == 404
        assert b"No such container" in result.stdout
        await client.aclose()

    async def test_transport_failure_raises(self) -> None:
        """Test an unreachable socket raises TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(RuntimeIdentity.DOCKER, handler)

        with pytest.raises(TransportError, match="/containers/abc/start"):
            await client.start("abc")
        await client.aclose()

    async def test_container_id_is_url_quoted(self) -> None:
        """Test ids with reserved characters stay inside one path segment."""
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.raw_path.decode())
            return httpx.Response(204)

        client = _client(RuntimeIdentity.DOCKER, handler)
        await client.stop("a/b")
        await client.aclose()

        assert paths == ["/containers/a%2Fb/stop"]

    @pytest.mark.parametrize(
        ("operation", "args", "method", "path"),
        [
            ("list", (), "GET", "/containers/json"),
            ("inspect", ("web",), "GET", "/containers/web/json"),
            ("restart", ("web",), "POST", "/containers/web/restart"),
            ("remove", ("web",), "DELETE", "/containers/web"),
            ("logs", ("web",), "GET", "/containers/web/logs"),
        ],
    )
    async def test_extended_operations(
        self, operation: str, args: tuple[str, ...], method: str, path: str
    ) -> None:
        """Test the extended operations reach the expected endpoints."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ok")

        client = _client(RuntimeIdentity.DOCKER, handler)
        result = await getattr(client, operation)(*args)
        await client.aclose()

        assert result.success is True
        assert seen[0].method == method
        assert seen[0].url.path == path


class TestLxdSocket:
    """Tests for the LXD socket client."""

    async def test_start_puts_state_action(self) -> None:
        """Test start is a PUT to the instance state endpoint."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"type": "async", "operation": "/1.0/operations/1"})

        client = _client(RuntimeIdentity.LXC_LXD, handler)
        result = await client.start("c1")
        await client.aclose()

        assert result.success is True
        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/1.0/instances/c1/state"
        assert json.loads(seen[0].content) == {"action": "start", "timeout": 30}


class TestUnsupportedSockets:
    """Tests for candidates whose operations are registered as unsupported."""

    async def test_kubeconfig_candidate_rejects_every_operation(
        self, mock_prober: MagicMock
    ) -> None:
        """Test a kubeconfig-only resolution succeeds but every operation fails."""
        mock_prober.probe_subprocess_capability = AsyncMock(
            return_value=PermissionVerdict(name="ctr", state=PermissionState.UNAVAILABLE)
        )
        mock_prober.probe_read_permissions = AsyncMock(
            return_value=[
                PermissionVerdict(name="read", state=PermissionState.GRANTED, path="/k"),
                PermissionVerdict(name="read", state=PermissionState.DENIED, path="/c"),
            ]
        )
        resolver = TransportResolver(mock_prober, environ={"KUBECONFIG": "/k"})

        resolution = await resolver.resolve(RuntimeIdentity.KUBERNETES_OTHER)

        assert resolution.transport.path == "/k"
        client = SocketLifecycleClient(
            RuntimeIdentity.KUBERNETES_OTHER,
            resolution.transport,
            http_transport=httpx.MockTransport(_no_io),
        )
        operations = [
            client.status("abc"),
            client.start("abc"),
            client.stop("abc"),
            client.create("abc", "nginx:latest"),
            client.list(),
            client.inspect("abc"),
            client.restart("abc"),
            client.remove("abc"),
            client.logs("abc"),
        ]
        for operation in operations:
            with pytest.raises(UnsupportedOperationError, match="Kubernetes via kubeconfig"):
                await operation
        await client.aclose()

    @pytest.mark.parametrize(
        "identity",
        [RuntimeIdentity.CRIO, RuntimeIdentity.CONTAINERD, RuntimeIdentity.RKT],
    )
    async def test_create_unsupported_before_io(self, identity: RuntimeIdentity) -> None:
        """Test create on a stub candidate raises without sending a request."""
        client = _client(identity, _no_io)

        with pytest.raises(UnsupportedOperationError, match="Socket-based create not supported"):
            await client.create("abc", "nginx:latest")
        await client.aclose()
