"""Lifecycle client that drives an engine through its CLI binary."""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from src.infra.errors import (
    PermissionDeniedError,
    TransportError,
    UnavailableError,
    UnsupportedOperationError,
)
from src.infra.permissions.prober import PermissionProber
from src.infra.permissions.types import PermissionState, PermissionVerdict
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import CliCommandSet, cli_commands
from src.infra.shell.runner import CommandRunner
from src.infra.shell.types import CommandResult

from .types import CliTransport, LifecycleClient


class CliLifecycleClient(LifecycleClient):
    """Lifecycle client bound to a CLI binary.

    Every operation builds its argument vector, passes it through the
    preflight guard, then runs the real command. The guard spawns the exact
    same vector once beforehand; it only rejects when the command cannot be
    invoked at all. A command that runs and exits non-zero passes the guard
    and its real exit status is returned as a failed CommandResult.

    Mutating commands therefore run twice while the guard is on. With a
    binary that rejects duplicates, `create` and `remove` return a failed
    result even though the guard's own invocation already took effect.
    Pass preflight=False (or set `preflight: false` in the settings) to run
    each command exactly once.
    """

    def __init__(
        self,
        identity: RuntimeIdentity,
        transport: CliTransport,
        prober: PermissionProber,
        runner: CommandRunner | None = None,
        commands: CliCommandSet | None = None,
        preflight: bool = True,
    ) -> None:
        """Initialize the client.

        Args:
            identity: Runtime being managed
            transport: Bound CLI transport
            prober: Prober used by the preflight guard
            runner: Command runner (a new one by default)
            commands: Argument builders (the identity's table entry by default)
            preflight: Run the guard before each operation
        """
        super().__init__(identity)
        self._transport = transport
        self._prober = prober
        self._runner = runner or CommandRunner()
        self._commands = commands or cli_commands(identity)
        self._preflight_enabled = preflight

    @property
    def transport(self) -> CliTransport:
        return self._transport

    @property
    def binary(self) -> str:
        return self._transport.binary

    # =========================================================================
    # Guard and execution
    # =========================================================================

    async def preflight(self, args: Sequence[str]) -> PermissionVerdict:
        """Verify that the exact argument vector can be invoked.

        Args:
            args: Arguments that will be passed to the binary

        Returns:
            The granted verdict

        Raises:
            UnavailableError: If the binary disappeared since resolution
            PermissionDeniedError: If the command is denied or the probe failed
        """
        verdict = await self._prober.probe_subprocess_capability(self.binary, args)
        if verdict.granted:
            return verdict

        command = " ".join([self.binary, *args])
        logger.warning(f"Preflight rejected '{command}': {verdict.describe()}")
        if verdict.state is PermissionState.UNAVAILABLE:
            raise UnavailableError(
                f"Cannot run '{command}': {verdict.describe()}",
                details=verdict.message,
            )
        raise PermissionDeniedError(
            f"Cannot run '{command}': {verdict.describe()}",
            verdict=verdict,
            details=verdict.message,
        )

    async def _execute(self, operation: str, args: list[str] | None) -> CommandResult:
        if args is None:
            raise UnsupportedOperationError(
                f"{operation} not supported on platform {self.identity.value}",
                details=f"binary: {self.binary}",
            )

        if self._preflight_enabled:
            await self.preflight(args)

        cmd = [self.binary, *args]
        try:
            return await self._runner.run(cmd)
        except FileNotFoundError as e:
            raise UnavailableError(f"Binary not found: {self.binary}", details=str(e)) from e
        except PermissionError as e:
            raise PermissionDeniedError(
                f"Permission denied running {self.binary}", details=str(e)
            ) from e
        except OSError as e:
            raise TransportError(f"Failed to run {operation} via {self.binary}", details=str(e)) from e

    # =========================================================================
    # Operations
    # =========================================================================

    async def status(self, container_id: str) -> CommandResult:
        return await self._execute("status", self._commands.status(container_id))

    async def start(self, container_id: str) -> CommandResult:
        return await self._execute("start", self._commands.start(container_id))

    async def stop(self, container_id: str) -> CommandResult:
        return await self._execute("stop", self._commands.stop(container_id))

    async def create(self, container_id: str, image: str) -> CommandResult:
        return await self._execute("create", self._commands.create(container_id, image))

    async def list(self) -> CommandResult:
        return await self._execute("list", self._commands.list())

    async def inspect(self, container_id: str) -> CommandResult:
        return await self._execute("inspect", self._commands.inspect(container_id))

    async def restart(self, container_id: str) -> CommandResult:
        return await self._execute("restart", self._commands.restart(container_id))

    async def remove(self, container_id: str) -> CommandResult:
        return await self._execute("remove", self._commands.remove(container_id))

    async def logs(self, container_id: str) -> CommandResult:
        return await self._execute("logs", self._commands.logs(container_id))
