"""Data types for command results.

CommandResult is the uniform output shape of every lifecycle operation,
whether it was served by a subprocess or by an HTTP-over-socket call.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.infra.errors import ProtocolError


@dataclass(frozen=True)
class CommandResult:
    """Result of a command execution.

    Attributes:
        success: True when the process exited 0 / the engine answered 2xx
        stdout: Raw output (process stdout or HTTP response body)
        stderr: Raw error output (always empty for socket calls)
        returncode: Process exit code; for socket calls 0 on success,
                    otherwise the HTTP status code
        status_code: HTTP status code for socket calls, None for subprocesses
    """

    success: bool
    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int = 0
    status_code: int | None = None

    @property
    def output(self) -> str:
        """Decoded stdout."""
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def error_output(self) -> str:
        """Decoded stderr."""
        return self.stderr.decode("utf-8", errors="replace")

    def raise_for_status(self) -> CommandResult:
        """Raise ProtocolError if the engine rejected the request.

        Returns:
            self, for chaining

        Raises:
            ProtocolError: If success is False
        """
        if not self.success:
            status = self.status_code if self.status_code is not None else self.returncode
            details = (self.error_output or self.output).strip() or None
            raise ProtocolError(f"Engine returned non-success status {status}", status, details)
        return self
