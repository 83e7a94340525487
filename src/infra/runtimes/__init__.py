"""Runtime identities, detection and static transport tables."""

from .detector import detect
from .identity import DetectedPlatform, PlatformKind, RuntimeIdentity
from .registry import (
    CliCommandSet,
    HttpRequestSpec,
    SocketCandidate,
    SocketOperations,
    binary_name,
    cli_commands,
    socket_candidates,
)

__all__ = [
    "detect",
    "DetectedPlatform",
    "PlatformKind",
    "RuntimeIdentity",
    "CliCommandSet",
    "HttpRequestSpec",
    "SocketCandidate",
    "SocketOperations",
    "binary_name",
    "cli_commands",
    "socket_candidates",
]
