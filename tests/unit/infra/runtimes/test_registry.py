"""Unit tests for the static runtime tables."""

from __future__ import annotations

import pytest

from src.infra.errors import UnsupportedOperationError
from src.infra.runtimes.identity import PlatformKind, RuntimeIdentity
from src.infra.runtimes.registry import (
    CRIO_OPERATIONS,
    DOCKER_API_OPERATIONS,
    LXD_API_OPERATIONS,
    HttpRequestSpec,
    binary_name,
    cli_commands,
    socket_candidates,
)


class TestBinaryNames:
    """Tests for binary_name."""

    @pytest.mark.parametrize(
        ("identity", "binary"),
        [
            (RuntimeIdentity.DOCKER, "docker"),
            (RuntimeIdentity.DOCKER_CGROUP, "docker"),
            (RuntimeIdentity.KUBERNETES_DOCKER, "docker"),
            (RuntimeIdentity.PODMAN, "podman"),
            (RuntimeIdentity.CRIO, "crictl"),
            (RuntimeIdentity.KUBERNETES_CRIO, "crictl"),
            (RuntimeIdentity.CONTAINERD, "ctr"),
            (RuntimeIdentity.KUBERNETES_OTHER, "ctr"),
            (RuntimeIdentity.RKT, "rkt"),
            (RuntimeIdentity.LXC_LXD, "lxc"),
            (RuntimeIdentity.SYSTEMD_NSPAWN, "machinectl"),
        ],
    )
    def test_mapped_identities(self, identity: RuntimeIdentity, binary: str) -> None:
        """Test each identity maps to its canonical binary."""
        assert binary_name(identity) == binary

    def test_unmapped_identity_falls_back_to_docker(self) -> None:
        """Test an identity without an entry uses the docker binary."""
        assert binary_name(RuntimeIdentity.HOST) == "docker"
        assert cli_commands(RuntimeIdentity.HOST).status("x") == ["inspect", "x"]


class TestCliCommands:
    """Tests for CLI argument builders."""

    def test_docker_vectors(self) -> None:
        """Test the docker builders produce the expected argument vectors."""
        commands = cli_commands(RuntimeIdentity.DOCKER)

        assert commands.status("abc") == ["inspect", "abc"]
        assert commands.start("abc") == ["start", "abc"]
        assert commands.stop("abc") == ["stop", "abc"]
        assert commands.create("abc", "nginx:latest") == ["create", "--name", "abc", "nginx:latest"]

    @pytest.mark.parametrize(
        "identity",
        [RuntimeIdentity.CRIO, RuntimeIdentity.CONTAINERD, RuntimeIdentity.LXC_LXD],
    )
    def test_create_unsupported_returns_none(self, identity: RuntimeIdentity) -> None:
        """Test binaries without a create command return None."""
        assert cli_commands(identity).create("abc", "nginx:latest") is None

    def test_ctr_uses_tasks_for_start_and_stop(self) -> None:
        """Test ctr starts and stops through its tasks subcommand."""
        commands = cli_commands(RuntimeIdentity.CONTAINERD)

        assert commands.start("abc")[:2] == ["tasks", "start"]
        assert commands.stop("abc") == ["tasks", "kill", "abc"]


class TestSocketCandidates:
    """Tests for socket candidate lists."""

    def test_docker_single_socket(self) -> None:
        """Test docker registers only its engine socket."""
        candidates = socket_candidates(RuntimeIdentity.DOCKER)

        assert [c.path for c in candidates] == ["/var/run/docker.sock"]
        assert candidates[0].operations is DOCKER_API_OPERATIONS

    def test_podman_order(self) -> None:
        """Test podman sockets keep registration order."""
        paths = [c.path for c in socket_candidates(RuntimeIdentity.PODMAN)]

        assert paths == ["/run/podman/podman.sock", "/var/run/podman/podman.sock"]

    def test_kubernetes_crio_prefers_kubeconfig(self) -> None:
        """Test the kubeconfig candidate is tried before the CRI-O socket."""
        candidates = socket_candidates(
            RuntimeIdentity.KUBERNETES_CRIO, environ={"KUBECONFIG": "/etc/kube/config"}
        )

        assert [c.path for c in candidates] == ["/etc/kube/config", "/var/run/crio/crio.sock"]
        assert candidates[1].operations is CRIO_OPERATIONS

    def test_kubeconfig_defaults_to_home(self) -> None:
        """Test the kubeconfig path is derived from HOME."""
        candidates = socket_candidates(RuntimeIdentity.KUBERNETES_OTHER, environ={"HOME": "/home/ci"})

        assert candidates[0].path == "/home/ci/.kube/config"

    @pytest.mark.parametrize(
        "identity", [RuntimeIdentity.HOST, RuntimeIdentity.SYSTEMD_NSPAWN]
    )
    def test_no_fallback(self, identity: RuntimeIdentity) -> None:
        """Test identities with no socket fallback return an empty list."""
        assert socket_candidates(identity) == []


class TestRequestBuilders:
    """Tests for HTTP request builders."""

    def test_docker_create(self) -> None:
        """Test docker create posts the image under the container name."""
        request = DOCKER_API_OPERATIONS.create("abc", "nginx:latest")

        assert request == HttpRequestSpec(
            "POST", "/containers/create?name=abc", {"Image": "nginx:latest"}
        )

    def test_docker_status(self) -> None:
        """Test docker status inspects the container."""
        assert DOCKER_API_OPERATIONS.status("abc") == HttpRequestSpec("GET", "/containers/abc/json")

    def test_lxd_stop(self) -> None:
        """Test LXD stop changes the instance state."""
        request = LXD_API_OPERATIONS.stop("c1")

        assert request.method == "PUT"
        assert request.url == "/1.0/instances/c1/state"
        assert request.body == {"action": "stop", "timeout": 30}

    def test_unsupported_builders_raise(self) -> None:
        """Test stub operation tables raise instead of building."""
        with pytest.raises(UnsupportedOperationError, match="Socket-based status not supported for CRI-O"):
            CRIO_OPERATIONS.status("abc")


class TestIdentity:
    """Tests for RuntimeIdentity classification."""

    @pytest.mark.parametrize(
        ("identity", "kind"),
        [
            (RuntimeIdentity.HOST, PlatformKind.HOST),
            (RuntimeIdentity.DOCKER, PlatformKind.STANDALONE),
            (RuntimeIdentity.KUBERNETES_OTHER, PlatformKind.KUBERNETES),
            (RuntimeIdentity.KUBERNETES_CRIO, PlatformKind.KUBERNETES),
        ],
    )
    def test_kind(self, identity: RuntimeIdentity, kind: PlatformKind) -> None:
        """Test each identity maps to its platform kind."""
        assert identity.kind is kind
