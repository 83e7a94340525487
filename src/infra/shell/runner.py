"""Command runner for executing container engine binaries.

This module provides the subprocess execution used by the CLI lifecycle
client and the CLI-backed engine controllers.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Sequence

from loguru import logger

from .types import CommandResult


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Commands run as asyncio subprocesses so that callers can cancel them;
    a cancelled call kills the child before re-raising. There is no
    built-in timeout and no retry.
    """

    async def run(self, cmd: Sequence[str]) -> CommandResult:
        """Execute a command and return structured result.

        Args:
            cmd: Command and arguments as a sequence

        Returns:
            CommandResult with success status, raw output, and return code

        Raises:
            FileNotFoundError: If the binary does not exist
            PermissionError: If the binary may not be executed
        """
        logger.debug(f"Running command: {' '.join(cmd)}")
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            kill_process(process)
            raise

        returncode = process.returncode or 0
        logger.debug(f"Command exited with status {returncode}: {cmd[0]}")
        return CommandResult(
            success=returncode == 0,
            stdout=stdout or b"",
            stderr=stderr or b"",
            returncode=returncode,
        )

    async def run_checked(self, cmd: Sequence[str]) -> str:
        """Execute a command and return decoded stdout, raising on failure.

        Args:
            cmd: Command and arguments

        Returns:
            Standard output from the command, stripped

        Raises:
            ProtocolError: If the command exits with a non-zero code
        """
        result = await self.run(cmd)
        return result.raise_for_status().output.strip()


def kill_process(process: asyncio.subprocess.Process) -> None:
    """Kill a child process, ignoring the race where it already exited."""
    with contextlib.suppress(ProcessLookupError):
        process.kill()
