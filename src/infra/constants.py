"""Runtime constants.

This module centralizes the socket paths, probe arguments and API
versions used when locating and talking to container engines.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RuntimeConstants:
    """Constants for container engine discovery.

    All attributes are class-level and immutable.
    """

    # Docker-compatible engine sockets
    DOCKER_SOCKET: str = "/var/run/docker.sock"
    PODMAN_SOCKETS: tuple[str, ...] = (
        "/run/podman/podman.sock",
        "/var/run/podman/podman.sock",
    )

    # CRI / containerd sockets
    CRIO_SOCKET: str = "/var/run/crio/crio.sock"
    CONTAINERD_SOCKET: str = "/run/containerd/containerd.sock"

    # LXD sockets (snap install first, then distro package)
    LXD_SOCKETS: tuple[str, ...] = (
        "/var/snap/lxd/common/lxd/unix.socket",
        "/var/lib/lxd/unix.socket",
    )

    RKT_DATA_DIR: str = "/var/lib/rkt"

    # In-cluster service account
    SERVICE_ACCOUNT_DIR: str = "/var/run/secrets/kubernetes.io/serviceaccount"

    # Marker files written by engines into their containers
    DOCKER_ENV_FILE: str = "/.dockerenv"
    PODMAN_ENV_FILE: str = "/run/.containerenv"

    # Cheap, side-effect-light invocation used to test for a CLI binary
    BINARY_PROBE_ARGS: tuple[str, ...] = ("--help",)

    # Container id used when probing command capability for a report
    REPORT_PROBE_CONTAINER: str = "runtime-bridge-probe"

    # HTTP API versions
    DOCKER_API_VERSION: str = "v1.41"
    LXD_API_VERSION: str = "1.0"

    # Host header used for HTTP-over-Unix-socket requests
    SOCKET_BASE_URL: str = "http://localhost"

    DEFAULT_NAMESPACE: str = "default"


DEFAULT_CONSTANTS = RuntimeConstants()
