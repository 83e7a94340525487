"""Runtime identity types.

A RuntimeIdentity names the container engine family found on the host.
It is produced once per process by the platform detector and never
mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlatformKind(str, Enum):
    """What kind of platform the process is running on."""

    STANDALONE = "standalone"  # A single engine managed directly
    KUBERNETES = "kubernetes"  # Engine managed by a Kubernetes node
    HOST = "host"  # No container engine at all


class RuntimeIdentity(str, Enum):
    """Container engine families."""

    HOST = "host"
    DOCKER = "docker"
    DOCKER_CGROUP = "docker-cgroup"
    PODMAN = "podman"
    CONTAINERD = "containerd"
    CRIO = "cri-o"
    LXC_LXD = "lxc-lxd"
    RKT = "rkt"
    SYSTEMD_NSPAWN = "systemd-nspawn"
    KUBERNETES_DOCKER = "kubernetes-docker"
    KUBERNETES_CRIO = "kubernetes-cri-o"
    KUBERNETES_OTHER = "kubernetes-other"

    @property
    def kind(self) -> PlatformKind:
        """Classify this identity by platform kind."""
        if self is RuntimeIdentity.HOST:
            return PlatformKind.HOST
        if self in _KUBERNETES_IDENTITIES:
            return PlatformKind.KUBERNETES
        return PlatformKind.STANDALONE

    @property
    def is_host(self) -> bool:
        return self is RuntimeIdentity.HOST


_KUBERNETES_IDENTITIES = frozenset(
    {
        RuntimeIdentity.KUBERNETES_DOCKER,
        RuntimeIdentity.KUBERNETES_CRIO,
        RuntimeIdentity.KUBERNETES_OTHER,
    }
)


@dataclass(frozen=True)
class DetectedPlatform:
    """Result of platform detection.

    Attributes:
        identity: Engine family found on the host
        reason: Human-readable hint describing what triggered the match
    """

    identity: RuntimeIdentity
    reason: str = ""

    @property
    def kind(self) -> PlatformKind:
        return self.identity.kind
