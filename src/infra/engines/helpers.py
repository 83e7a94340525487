from __future__ import annotations

import os

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import UnsupportedOperationError
from src.infra.runtimes.identity import RuntimeIdentity

from .controller import EngineController


def get_namespace() -> str:
    """Get the Kubernetes namespace from the environment or default."""
    return os.environ.get("K8S_NAMESPACE", DEFAULT_CONSTANTS.DEFAULT_NAMESPACE)


def get_engine_controller(identity: RuntimeIdentity) -> EngineController:
    """Get a typed engine controller for a runtime.

    Args:
        identity: Runtime identity

    Returns:
        A new EngineController for the identity's engine API

    Raises:
        UnsupportedOperationError: For the host and for engines without a
                                   typed controller
    """
    match identity:
        case RuntimeIdentity.DOCKER | RuntimeIdentity.DOCKER_CGROUP:
            from src.infra.engines.docker_controller import DockerController

            return DockerController()
        case RuntimeIdentity.PODMAN:
            from src.infra.engines.docker_controller import PodmanController

            return PodmanController()
        case (
            RuntimeIdentity.KUBERNETES_DOCKER
            | RuntimeIdentity.KUBERNETES_CRIO
            | RuntimeIdentity.KUBERNETES_OTHER
        ):
            from src.infra.engines.kr8s_controller import Kr8sKubernetesController

            return Kr8sKubernetesController()
        case RuntimeIdentity.LXC_LXD:
            from src.infra.engines.lxd_controller import LxdController

            return LxdController()
        case RuntimeIdentity.CONTAINERD:
            from src.infra.engines.containerd_controller import ContainerdController

            return ContainerdController()
        case _:
            raise UnsupportedOperationError(
                f"No engine controller for platform {identity.value}"
            )
