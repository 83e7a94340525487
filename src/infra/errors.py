"""Error taxonomy for runtime resolution and lifecycle operations.

Resolution failures (PermissionDeniedError, UnavailableError) are raised
while building a client and are fatal to that client. Operation failures
are raised per call and leave the client usable.

A non-success answer from a reachable engine is NOT raised by lifecycle
clients; it comes back as a failed CommandResult. ProtocolError exists for
callers that opt in through CommandResult.raise_for_status() and for the
typed engine controllers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.infra.permissions.types import PermissionVerdict


class LifecycleError(Exception):
    """Base class for all runtime-bridge errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class PermissionDeniedError(LifecycleError):
    """The process lacks the OS-level permission required for a transport."""

    def __init__(
        self,
        message: str,
        verdict: PermissionVerdict | None = None,
        details: str | None = None,
    ):
        self.verdict = verdict
        super().__init__(message, details)


class UnavailableError(LifecycleError):
    """A binary or socket could not be found."""


class RuntimeUnreachableError(UnavailableError):
    """Neither the CLI binary nor any socket candidate is usable."""

    def __init__(self, message: str, binary: str, candidate_paths: Sequence[str]):
        self.binary = binary
        self.candidate_paths = tuple(candidate_paths)
        details = (
            f"binary: {binary}; "
            f"socket candidates tried ({len(self.candidate_paths)}): "
            f"{', '.join(self.candidate_paths) or 'none'}"
        )
        super().__init__(message, details)


class TransportError(LifecycleError):
    """I/O failure while talking to a reachable transport."""


class UnsupportedOperationError(LifecycleError):
    """The operation has no meaning on this engine or transport."""


class ProtocolError(LifecycleError):
    """A reachable engine answered with a non-success status."""

    def __init__(self, message: str, status: int, details: str | None = None):
        self.status = status
        super().__init__(message, details)
