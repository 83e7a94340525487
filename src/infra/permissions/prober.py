"""Permission prober.

Answers, without mutating system state, whether the current process may
spawn subprocesses at all, spawn a specific command, or read a path.

Verdicts are never cached: capabilities can change between calls
(privilege drops, sockets appearing after a daemon restart). Each probe
is a single attempt.
"""

from __future__ import annotations

import asyncio
import os
import socket
import sys
from collections.abc import Sequence

from loguru import logger

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.runtimes.identity import RuntimeIdentity
from src.infra.runtimes.registry import binary_name, cli_commands, socket_candidates
from src.infra.shell.runner import kill_process

from .types import PermissionReport, PermissionState, PermissionVerdict

# Interpreter platforms without process support
_NO_SUBPROCESS_PLATFORMS = frozenset({"emscripten", "wasi"})


class PermissionProber:
    """Probe subprocess and filesystem capabilities of the current process.

    Example:
        prober = PermissionProber()
        if prober.probe_subprocess_permission().granted:
            verdict = await prober.probe_subprocess_capability("docker", ["--help"])
    """

    def __init__(self, *, allow_subprocess: bool = True) -> None:
        """Initialize the prober.

        Args:
            allow_subprocess: When False, subprocess permission is always
                              reported as denied (configuration kill switch)
        """
        self._allow_subprocess = allow_subprocess

    # =========================================================================
    # Subprocess permission
    # =========================================================================

    def probe_subprocess_permission(self) -> PermissionVerdict:
        """Query whether this process may spawn subprocesses at all.

        No process is spawned.

        Returns:
            granted, denied, or error if the query itself failed
        """
        try:
            if sys.platform in _NO_SUBPROCESS_PLATFORMS:
                return PermissionVerdict(
                    name="run",
                    state=PermissionState.DENIED,
                    message=f"subprocesses are not supported on {sys.platform}",
                )
            if not self._allow_subprocess:
                return PermissionVerdict(
                    name="run",
                    state=PermissionState.DENIED,
                    message="subprocess execution disabled by configuration",
                )
            if os.name == "posix" and not (
                hasattr(os, "posix_spawn") or hasattr(os, "fork")
            ):
                return PermissionVerdict(
                    name="run",
                    state=PermissionState.DENIED,
                    message="no process spawning primitive available",
                )
        except Exception as exc:
            return PermissionVerdict(
                name="run",
                state=PermissionState.ERROR,
                message=f"failed to query run permission: {exc}",
            )
        return PermissionVerdict(name="run", state=PermissionState.GRANTED)

    async def probe_subprocess_capability(
        self,
        binary: str,
        args: Sequence[str],
    ) -> PermissionVerdict:
        """Check whether a specific command can be invoked.

        Spawns the command with output discarded and waits for it to exit.
        A non-zero exit still counts as granted: the binary is invocable,
        only that particular command failed. The exit status is recorded in
        the verdict message.

        Args:
            binary: Executable name or path
            args: Arguments to pass

        Returns:
            granted, denied, unavailable (not found), or error
        """
        name = " ".join([binary, *args])

        run = self.probe_subprocess_permission()
        if run.state is PermissionState.ERROR:
            return PermissionVerdict(name=name, state=PermissionState.ERROR, message=run.message)
        if not run.granted:
            return PermissionVerdict(
                name=name,
                state=PermissionState.DENIED,
                message="run permission not granted",
            )

        try:
            process = await asyncio.create_subprocess_exec(
                binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except FileNotFoundError:
            verdict = PermissionVerdict(name=name, state=PermissionState.UNAVAILABLE)
            logger.debug(f"Capability probe '{name}': {verdict.describe()}")
            return verdict
        except PermissionError:
            verdict = PermissionVerdict(
                name=name,
                state=PermissionState.DENIED,
                message="permission denied to run subprocess",
            )
            logger.debug(f"Capability probe '{name}': {verdict.describe()}")
            return verdict
        except OSError as exc:
            return PermissionVerdict(name=name, state=PermissionState.ERROR, message=str(exc))

        try:
            returncode = await process.wait()
        except asyncio.CancelledError:
            kill_process(process)
            raise
        except OSError as exc:
            kill_process(process)
            return PermissionVerdict(name=name, state=PermissionState.ERROR, message=str(exc))

        message = None if returncode == 0 else f"exited with status {returncode}"
        verdict = PermissionVerdict(name=name, state=PermissionState.GRANTED, message=message)
        logger.debug(f"Capability probe '{name}': {verdict.describe()}")
        return verdict

    # =========================================================================
    # Read permission
    # =========================================================================

    async def probe_read_permission(self, path: str) -> PermissionVerdict:
        """Check read access to a path.

        Uses a pure permission query when the platform provides one,
        falling back to opening and immediately closing the path.

        Args:
            path: Filesystem path (socket, kubeconfig, directory)

        Returns:
            Verdict with the path recorded
        """
        return await asyncio.to_thread(_probe_read, path)

    async def probe_read_permissions(self, paths: Sequence[str]) -> list[PermissionVerdict]:
        """Check read access to several paths concurrently.

        Args:
            paths: Paths to probe

        Returns:
            Verdicts in input order; empty when the platform has no Unix
            domain sockets (nothing useful to report)
        """
        if not hasattr(socket, "AF_UNIX"):
            return []
        verdicts = await asyncio.gather(*(self.probe_read_permission(p) for p in paths))
        return list(verdicts)

    # =========================================================================
    # Reporting
    # =========================================================================

    async def build_report(self, identity: RuntimeIdentity) -> PermissionReport:
        """Collect every probe relevant to one runtime.

        Spawns the runtime's status/start/stop commands against a probe
        container id, so it must not be called in a loop.

        Args:
            identity: Runtime to report on

        Returns:
            PermissionReport for the runtime
        """
        run = self.probe_subprocess_permission()
        paths = [candidate.path for candidate in socket_candidates(identity)]
        reads = await self.probe_read_permissions(paths)

        binary = binary_name(identity)
        commands = cli_commands(identity)
        probe_id = DEFAULT_CONSTANTS.REPORT_PROBE_CONTAINER

        async def _command(args: list[str] | None) -> PermissionVerdict:
            if args is None:
                return PermissionVerdict(
                    name=binary,
                    state=PermissionState.UNAVAILABLE,
                    message="operation not supported by this binary",
                )
            return await self.probe_subprocess_capability(binary, args)

        status, start, stop = await asyncio.gather(
            _command(commands.status(probe_id)),
            _command(commands.start(probe_id)),
            _command(commands.stop(probe_id)),
        )
        return PermissionReport(
            platform=identity.value,
            run_permission=run,
            read_permissions=reads,
            status_command=status,
            start_command=start,
            stop_command=stop,
        )


def _probe_read(path: str) -> PermissionVerdict:
    """Synchronous read probe, run in a worker thread."""
    try:
        if hasattr(os, "access"):
            if os.access(path, os.R_OK):
                return PermissionVerdict(name="read", state=PermissionState.GRANTED, path=path)
            if not os.path.lexists(path):
                return PermissionVerdict(
                    name="read",
                    state=PermissionState.UNAVAILABLE,
                    path=path,
                    message="path does not exist",
                )
            return PermissionVerdict(
                name="read",
                state=PermissionState.DENIED,
                path=path,
                message="read access denied",
            )

        with open(path, "rb"):
            pass
        return PermissionVerdict(name="read", state=PermissionState.GRANTED, path=path)
    except FileNotFoundError:
        return PermissionVerdict(
            name="read",
            state=PermissionState.UNAVAILABLE,
            path=path,
            message="path does not exist",
        )
    except PermissionError:
        return PermissionVerdict(
            name="read",
            state=PermissionState.DENIED,
            path=path,
            message="read access denied",
        )
    except OSError as exc:
        return PermissionVerdict(name="read", state=PermissionState.ERROR, path=path, message=str(exc))
