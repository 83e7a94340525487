"""Subprocess execution for container engine binaries."""

from .runner import CommandRunner, kill_process
from .types import CommandResult

__all__ = [
    "CommandResult",
    "CommandRunner",
    "kill_process",
]
