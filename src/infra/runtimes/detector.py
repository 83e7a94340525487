"""Minimal platform detector.

Classifies "what is running here" from well-known marker files, sockets
and binaries on PATH. The first matching rule wins; when nothing matches
the platform is the bare host.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from pathlib import Path

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS

from .identity import DetectedPlatform, RuntimeIdentity

CGROUP_FILE = Path("/proc/1/cgroup")


def _read_cgroup() -> str:
    try:
        return CGROUP_FILE.read_text()
    except OSError:
        return ""


def _any_exists(paths: tuple[str, ...] | list[str]) -> str | None:
    for path in paths:
        if os.path.exists(path):
            return path
    return None


def _detect_kubernetes(env: Mapping[str, str]) -> DetectedPlatform | None:
    c = DEFAULT_CONSTANTS
    in_cluster = bool(env.get("KUBERNETES_SERVICE_HOST")) or os.path.isdir(
        c.SERVICE_ACCOUNT_DIR
    )
    if not in_cluster:
        return None

    if os.path.exists(c.DOCKER_SOCKET):
        return DetectedPlatform(RuntimeIdentity.KUBERNETES_DOCKER, f"kubernetes + {c.DOCKER_SOCKET}")
    if os.path.exists(c.CRIO_SOCKET):
        return DetectedPlatform(RuntimeIdentity.KUBERNETES_CRIO, f"kubernetes + {c.CRIO_SOCKET}")
    return DetectedPlatform(RuntimeIdentity.KUBERNETES_OTHER, "kubernetes service account")


def _detect_standalone() -> DetectedPlatform | None:
    c = DEFAULT_CONSTANTS

    if os.path.exists(c.DOCKER_SOCKET):
        return DetectedPlatform(RuntimeIdentity.DOCKER, c.DOCKER_SOCKET)
    if shutil.which("docker"):
        return DetectedPlatform(RuntimeIdentity.DOCKER, "docker on PATH")
    if os.path.exists(c.DOCKER_ENV_FILE) or "docker" in _read_cgroup():
        return DetectedPlatform(RuntimeIdentity.DOCKER_CGROUP, "docker cgroup")

    if path := _any_exists(c.PODMAN_SOCKETS):
        return DetectedPlatform(RuntimeIdentity.PODMAN, path)
    if shutil.which("podman") or os.path.exists(c.PODMAN_ENV_FILE):
        return DetectedPlatform(RuntimeIdentity.PODMAN, "podman on PATH")

    if os.path.exists(c.CONTAINERD_SOCKET) or shutil.which("ctr"):
        return DetectedPlatform(RuntimeIdentity.CONTAINERD, "containerd")
    if os.path.exists(c.CRIO_SOCKET) or shutil.which("crictl"):
        return DetectedPlatform(RuntimeIdentity.CRIO, "cri-o")

    if path := _any_exists(c.LXD_SOCKETS):
        return DetectedPlatform(RuntimeIdentity.LXC_LXD, path)
    if shutil.which("lxc"):
        return DetectedPlatform(RuntimeIdentity.LXC_LXD, "lxc on PATH")

    if os.path.isdir(c.RKT_DATA_DIR) or shutil.which("rkt"):
        return DetectedPlatform(RuntimeIdentity.RKT, "rkt")
    if shutil.which("machinectl") and os.path.isdir("/var/lib/machines"):
        return DetectedPlatform(RuntimeIdentity.SYSTEMD_NSPAWN, "machinectl")

    return None


def detect(
    override: RuntimeIdentity | None = None,
    environ: Mapping[str, str] | None = None,
) -> DetectedPlatform:
    """Detect the container platform of the current host.

    Args:
        override: Identity to use instead of probing (from configuration)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        DetectedPlatform; RuntimeIdentity.HOST when no engine is found
    """
    if override is not None:
        return DetectedPlatform(override, "configured")

    env = os.environ if environ is None else environ
    platform = _detect_kubernetes(env) or _detect_standalone()
    if platform is None:
        platform = DetectedPlatform(RuntimeIdentity.HOST, "no container engine found")

    logger.debug(f"Detected platform {platform.identity.value} ({platform.reason})")
    return platform
