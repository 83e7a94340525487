"""Data types for permission probes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PermissionState(str, Enum):
    """Outcome of a single capability probe."""

    GRANTED = "granted"
    DENIED = "denied"
    UNAVAILABLE = "unavailable"  # Binary or path not found
    ERROR = "error"  # The probe itself failed


@dataclass(frozen=True)
class PermissionVerdict:
    """Result of probing one capability.

    Attributes:
        name: What was probed ("run", "read", or "<binary> <args>")
        state: Probe outcome
        path: Path probed, for read checks
        message: Short diagnostic, if any
    """

    name: str
    state: PermissionState
    path: str | None = None
    message: str | None = None

    @property
    def granted(self) -> bool:
        return self.state is PermissionState.GRANTED

    def describe(self) -> str:
        """Render the state plus message, e.g. "denied (run permission not granted)"."""
        if self.message:
            return f"{self.state.value} ({self.message})"
        return self.state.value


@dataclass(frozen=True)
class PermissionReport:
    """Diagnostic bundle of every probe relevant to one runtime.

    Attributes:
        platform: Runtime identity value the report was built for
        run_permission: Subprocess permission verdict
        read_permissions: Read verdicts for each socket candidate, in order
        status_command: Capability verdict for the status argument vector
        start_command: Capability verdict for the start argument vector
        stop_command: Capability verdict for the stop argument vector
    """

    platform: str
    run_permission: PermissionVerdict
    read_permissions: list[PermissionVerdict] = field(default_factory=list)
    status_command: PermissionVerdict | None = None
    start_command: PermissionVerdict | None = None
    stop_command: PermissionVerdict | None = None

    @property
    def ok(self) -> bool:
        """True if subprocesses are allowed and every command is invocable."""
        commands = (self.status_command, self.start_command, self.stop_command)
        return self.run_permission.granted and all(
            verdict is not None and verdict.granted for verdict in commands
        )
