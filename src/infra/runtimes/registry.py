"""Static per-runtime transport tables.

For every RuntimeIdentity this module records:
- the canonical CLI binary name
- the CLI argument-vector builder for each lifecycle operation
- the ordered socket transport candidates, each with its own HTTP
  request builders

Builders are pure functions. A CLI builder returns None when the
operation is not supported by that binary; a socket builder raises
UnsupportedOperationError. Nothing here performs I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import UnsupportedOperationError
from src.infra.runtimes.identity import RuntimeIdentity
from src.utils.paths import get_kubeconfig_path

# Identity whose entries are used when a table has no mapping
DEFAULT_IDENTITY = RuntimeIdentity.DOCKER

IdArgs = Callable[[str], list[str] | None]
CreateArgs = Callable[[str, str], list[str] | None]
ListArgs = Callable[[], list[str] | None]


def _unsupported_args(*_: str) -> None:
    return None


# =============================================================================
# CLI argument builders
# =============================================================================


@dataclass(frozen=True)
class CliCommandSet:
    """Argument-vector builders for one CLI binary.

    Each builder returns the arguments to pass after the binary name,
    or None when the binary cannot perform the operation.
    """

    status: IdArgs
    start: IdArgs
    stop: IdArgs
    create: CreateArgs = _unsupported_args
    list: ListArgs = _unsupported_args
    inspect: IdArgs = _unsupported_args
    restart: IdArgs = _unsupported_args
    remove: IdArgs = _unsupported_args
    logs: IdArgs = _unsupported_args


DOCKER_CLI = CliCommandSet(
    status=lambda cid: ["inspect", cid],
    start=lambda cid: ["start", cid],
    stop=lambda cid: ["stop", cid],
    create=lambda cid, image: ["create", "--name", cid, image],
    list=lambda: ["ps", "--all"],
    inspect=lambda cid: ["inspect", cid],
    restart=lambda cid: ["restart", cid],
    remove=lambda cid: ["rm", cid],
    logs=lambda cid: ["logs", cid],
)

# crictl cannot create a container without a pod sandbox config
CRICTL_CLI = CliCommandSet(
    status=lambda cid: ["inspect", cid],
    start=lambda cid: ["start", cid],
    stop=lambda cid: ["stop", cid],
    list=lambda: ["ps", "--all"],
    inspect=lambda cid: ["inspect", cid],
    remove=lambda cid: ["rm", cid],
    logs=lambda cid: ["logs", cid],
)

# ctr runs processes through the tasks API; containers are only metadata
CTR_CLI = CliCommandSet(
    status=lambda cid: ["containers", "info", cid],
    start=lambda cid: ["tasks", "start", "--detach", cid],
    stop=lambda cid: ["tasks", "kill", cid],
    list=lambda: ["containers", "list"],
    inspect=lambda cid: ["containers", "info", cid],
    remove=lambda cid: ["containers", "delete", cid],
)

RKT_CLI = CliCommandSet(
    status=lambda cid: ["status", cid],
    start=lambda cid: ["run", cid],
    stop=lambda cid: ["stop", cid],
    list=lambda: ["list"],
    inspect=lambda cid: ["status", cid],
    remove=lambda cid: ["rm", cid],
)

LXC_CLI = CliCommandSet(
    status=lambda cid: ["info", cid],
    start=lambda cid: ["start", cid],
    stop=lambda cid: ["stop", cid],
    list=lambda: ["list"],
    inspect=lambda cid: ["info", cid],
    restart=lambda cid: ["restart", cid],
    remove=lambda cid: ["delete", cid],
    logs=lambda cid: ["console", "--show-log", cid],
)

MACHINECTL_CLI = CliCommandSet(
    status=lambda cid: ["show", cid],
    start=lambda cid: ["start", cid],
    stop=lambda cid: ["poweroff", cid],
    list=lambda: ["list"],
    inspect=lambda cid: ["status", cid],
    restart=lambda cid: ["reboot", cid],
    remove=lambda cid: ["remove", cid],
)


_BINARY_NAMES: Mapping[RuntimeIdentity, str] = {
    RuntimeIdentity.DOCKER: "docker",
    RuntimeIdentity.DOCKER_CGROUP: "docker",
    RuntimeIdentity.KUBERNETES_DOCKER: "docker",
    RuntimeIdentity.PODMAN: "podman",
    RuntimeIdentity.CRIO: "crictl",
    RuntimeIdentity.KUBERNETES_CRIO: "crictl",
    RuntimeIdentity.CONTAINERD: "ctr",
    RuntimeIdentity.KUBERNETES_OTHER: "ctr",
    RuntimeIdentity.RKT: "rkt",
    RuntimeIdentity.LXC_LXD: "lxc",
    RuntimeIdentity.SYSTEMD_NSPAWN: "machinectl",
}

_CLI_COMMANDS: Mapping[RuntimeIdentity, CliCommandSet] = {
    RuntimeIdentity.DOCKER: DOCKER_CLI,
    RuntimeIdentity.DOCKER_CGROUP: DOCKER_CLI,
    RuntimeIdentity.KUBERNETES_DOCKER: DOCKER_CLI,
    RuntimeIdentity.PODMAN: DOCKER_CLI,
    RuntimeIdentity.CRIO: CRICTL_CLI,
    RuntimeIdentity.KUBERNETES_CRIO: CRICTL_CLI,
    RuntimeIdentity.CONTAINERD: CTR_CLI,
    RuntimeIdentity.KUBERNETES_OTHER: CTR_CLI,
    RuntimeIdentity.RKT: RKT_CLI,
    RuntimeIdentity.LXC_LXD: LXC_CLI,
    RuntimeIdentity.SYSTEMD_NSPAWN: MACHINECTL_CLI,
}


def binary_name(identity: RuntimeIdentity) -> str:
    """Get the canonical CLI binary for a runtime.

    Args:
        identity: Runtime identity

    Returns:
        Binary name, or the default identity's binary when unmapped
    """
    return _BINARY_NAMES.get(identity, _BINARY_NAMES[DEFAULT_IDENTITY])


def cli_commands(identity: RuntimeIdentity) -> CliCommandSet:
    """Get the CLI argument builders for a runtime (default when unmapped)."""
    return _CLI_COMMANDS.get(identity, _CLI_COMMANDS[DEFAULT_IDENTITY])


# =============================================================================
# Socket request builders
# =============================================================================


@dataclass(frozen=True)
class HttpRequestSpec:
    """An HTTP request to send over a Unix socket."""

    method: str
    url: str
    body: Any = None


IdRequest = Callable[[str], HttpRequestSpec]
CreateRequest = Callable[[str, str], HttpRequestSpec]
ListRequest = Callable[[], HttpRequestSpec]


@dataclass(frozen=True)
class SocketOperations:
    """HTTP request builders for every lifecycle operation."""

    status: IdRequest
    start: IdRequest
    stop: IdRequest
    create: CreateRequest
    list: ListRequest
    inspect: IdRequest
    restart: IdRequest
    remove: IdRequest
    logs: IdRequest


@dataclass(frozen=True)
class SocketCandidate:
    """One socket path plus the operations it can serve."""

    path: str
    operations: SocketOperations


def _quoted(value: str) -> str:
    return quote(value, safe="")


def unsupported_operations(reason: str) -> SocketOperations:
    """Build an operation table whose every builder raises.

    Args:
        reason: Suffix naming the engine/transport, e.g. "for CRI-O"

    Returns:
        SocketOperations where each builder raises UnsupportedOperationError
    """

    def _raiser(operation: str) -> Callable[..., HttpRequestSpec]:
        def _build(*_: str) -> HttpRequestSpec:
            raise UnsupportedOperationError(
                f"Socket-based {operation} not supported {reason}"
            )

        return _build

    return SocketOperations(
        status=_raiser("status"),
        start=_raiser("start"),
        stop=_raiser("stop"),
        create=_raiser("create"),
        list=_raiser("list"),
        inspect=_raiser("inspect"),
        restart=_raiser("restart"),
        remove=_raiser("remove"),
        logs=_raiser("logs"),
    )


DOCKER_API_OPERATIONS = SocketOperations(
    status=lambda cid: HttpRequestSpec("GET", f"/containers/{_quoted(cid)}/json"),
    start=lambda cid: HttpRequestSpec("POST", f"/containers/{_quoted(cid)}/start"),
    stop=lambda cid: HttpRequestSpec("POST", f"/containers/{_quoted(cid)}/stop"),
    create=lambda cid, image: HttpRequestSpec(
        "POST", f"/containers/create?name={_quoted(cid)}", {"Image": image}
    ),
    list=lambda: HttpRequestSpec("GET", "/containers/json?all=true"),
    inspect=lambda cid: HttpRequestSpec("GET", f"/containers/{_quoted(cid)}/json"),
    restart=lambda cid: HttpRequestSpec(
        "POST", f"/containers/{_quoted(cid)}/restart"
    ),
    remove=lambda cid: HttpRequestSpec("DELETE", f"/containers/{_quoted(cid)}"),
    logs=lambda cid: HttpRequestSpec(
        "GET", f"/containers/{_quoted(cid)}/logs?stdout=true&stderr=true"
    ),
)

_LXD = f"/{DEFAULT_CONSTANTS.LXD_API_VERSION}/instances"


def _lxd_state(cid: str, action: str) -> HttpRequestSpec:
    return HttpRequestSpec(
        "PUT", f"{_LXD}/{_quoted(cid)}/state", {"action": action, "timeout": 30}
    )


LXD_API_OPERATIONS = SocketOperations(
    status=lambda cid: HttpRequestSpec("GET", f"{_LXD}/{_quoted(cid)}/state"),
    start=lambda cid: _lxd_state(cid, "start"),
    stop=lambda cid: _lxd_state(cid, "stop"),
    create=lambda cid, image: HttpRequestSpec(
        "POST",
        _LXD,
        {"name": cid, "source": {"type": "image", "alias": image}},
    ),
    list=lambda: HttpRequestSpec("GET", _LXD),
    inspect=lambda cid: HttpRequestSpec("GET", f"{_LXD}/{_quoted(cid)}"),
    restart=lambda cid: _lxd_state(cid, "restart"),
    remove=lambda cid: HttpRequestSpec("DELETE", f"{_LXD}/{_quoted(cid)}"),
    logs=lambda cid: HttpRequestSpec("GET", f"{_LXD}/{_quoted(cid)}/logs/lxc.log"),
)

KUBECONFIG_OPERATIONS = unsupported_operations("for Kubernetes via kubeconfig")
CRIO_OPERATIONS = unsupported_operations("for CRI-O")
CONTAINERD_OPERATIONS = unsupported_operations("for containerd via HTTP")
RKT_OPERATIONS = unsupported_operations("for rkt")


def socket_candidates(
    identity: RuntimeIdentity,
    environ: Mapping[str, str] | None = None,
) -> list[SocketCandidate]:
    """List the socket transport candidates for a runtime, in preference order.

    The kubeconfig path is read from the environment on every call; all
    other entries are fixed.

    Args:
        identity: Runtime identity
        environ: Environment used to locate the kubeconfig (defaults to os.environ)

    Returns:
        Ordered candidates; empty when no socket fallback exists
    """
    c = DEFAULT_CONSTANTS
    docker = SocketCandidate(c.DOCKER_SOCKET, DOCKER_API_OPERATIONS)
    crio = SocketCandidate(c.CRIO_SOCKET, CRIO_OPERATIONS)
    containerd = SocketCandidate(c.CONTAINERD_SOCKET, CONTAINERD_OPERATIONS)

    match identity:
        case RuntimeIdentity.DOCKER | RuntimeIdentity.DOCKER_CGROUP:
            return [docker]
        case RuntimeIdentity.KUBERNETES_DOCKER:
            return [docker, _kubeconfig(environ)]
        case RuntimeIdentity.PODMAN:
            return [SocketCandidate(p, DOCKER_API_OPERATIONS) for p in c.PODMAN_SOCKETS]
        case RuntimeIdentity.CRIO:
            return [crio]
        case RuntimeIdentity.KUBERNETES_CRIO:
            return [_kubeconfig(environ), crio]
        case RuntimeIdentity.KUBERNETES_OTHER:
            return [_kubeconfig(environ), containerd]
        case RuntimeIdentity.CONTAINERD:
            return [containerd]
        case RuntimeIdentity.RKT:
            return [SocketCandidate(c.RKT_DATA_DIR, RKT_OPERATIONS)]
        case RuntimeIdentity.LXC_LXD:
            return [SocketCandidate(p, LXD_API_OPERATIONS) for p in c.LXD_SOCKETS]
        case _:
            return []


def _kubeconfig(environ: Mapping[str, str] | None) -> SocketCandidate:
    return SocketCandidate(get_kubeconfig_path(environ), KUBECONFIG_OPERATIONS)
