"""Transport resolver.

Decides, for one runtime identity, whether to reach the engine through
its CLI binary or through one of its registered socket candidates. The
decision is made once per client; nothing is cached between resolutions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.errors import PermissionDeniedError, RuntimeUnreachableError
from src.infra.permissions.prober import PermissionProber
from src.infra.permissions.types import PermissionState
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import binary_name, socket_candidates

from .types import CliTransport, SocketTransport, TransportCandidate


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful resolution.

    Attributes:
        identity: Runtime that was resolved
        transport: Chosen transport; None only for the host identity
    """

    identity: RuntimeIdentity
    transport: TransportCandidate | None

    def describe(self) -> str:
        if self.transport is None:
            return f"{self.identity.value} -> none"
        return f"{self.identity.value} -> {self.transport.describe()}"


class TransportResolver:
    """Pick exactly one transport for a runtime identity, or fail.

    The CLI binary is strictly preferred; sockets are only considered when
    the binary cannot be found. Subprocess permission gates both paths.
    """

    def __init__(
        self,
        prober: PermissionProber,
        probe_args: Sequence[str] = DEFAULT_CONSTANTS.BINARY_PROBE_ARGS,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            prober: Permission prober used for every check
            probe_args: Arguments for the binary presence probe
            environ: Environment used to locate the kubeconfig (defaults to os.environ)
        """
        self._prober = prober
        self._probe_args = list(probe_args)
        self._environ = environ

    async def resolve(self, identity: RuntimeIdentity) -> Resolution:
        """Resolve the transport for a runtime.

        Args:
            identity: Detected runtime identity

        Returns:
            Resolution bound to one transport

        Raises:
            PermissionDeniedError: If the process may not spawn subprocesses
            RuntimeUnreachableError: If neither the binary nor any socket is usable
        """
        if identity.is_host:
            logger.debug("Host platform: no transport to resolve")
            return Resolution(identity, None)

        run = self._prober.probe_subprocess_permission()
        if not run.granted:
            logger.warning(f"Cannot resolve {identity.value}: run permission {run.describe()}")
            raise PermissionDeniedError(
                f"Subprocess permission required to manage {identity.value}",
                verdict=run,
                details=run.describe(),
            )

        binary = binary_name(identity)
        presence = await self._prober.probe_subprocess_capability(binary, self._probe_args)
        if presence.state is not PermissionState.UNAVAILABLE:
            resolution = Resolution(identity, CliTransport(binary))
            logger.info(f"Resolved transport {resolution.describe()}")
            return resolution

        candidates = socket_candidates(identity, self._environ)
        paths = [candidate.path for candidate in candidates]
        verdicts = await self._prober.probe_read_permissions(paths)

        # verdicts come back in registration order, so the first match wins
        for candidate, verdict in zip(candidates, verdicts, strict=False):
            if verdict.granted:
                resolution = Resolution(identity, SocketTransport(candidate))
                logger.info(f"Resolved transport {resolution.describe()}")
                return resolution

        logger.warning(
            f"No transport for {identity.value}: '{binary}' not found and "
            f"{len(paths)} socket candidate(s) unreadable"
        )
        raise RuntimeUnreachableError(
            f"No reachable transport for {identity.value}: binary '{binary}' "
            f"not found and no readable socket among {len(paths)} candidate(s)",
            binary=binary,
            candidate_paths=paths,
        )
