"""Container lifecycle clients and transport resolution."""

from src.infra.errors import (
    LifecycleError,
    PermissionDeniedError,
    ProtocolError,
    RuntimeUnreachableError,
    TransportError,
    UnavailableError,
    UnsupportedOperationError,
)

from .cli_client import CliLifecycleClient
from .factory import LifecycleClientFactory, resolve
from .noop_client import NoopLifecycleClient
from .resolver import Resolution, TransportResolver
from .socket_client import SocketLifecycleClient
from .types import (
    CliTransport,
    LifecycleClient,
    SocketTransport,
    TransportCandidate,
    TransportKind,
)

__all__ = [
    "CliLifecycleClient",
    "CliTransport",
    "LifecycleClient",
    "LifecycleClientFactory",
    "LifecycleError",
    "NoopLifecycleClient",
    "PermissionDeniedError",
    "ProtocolError",
    "Resolution",
    "RuntimeUnreachableError",
    "SocketLifecycleClient",
    "SocketTransport",
    "TransportCandidate",
    "TransportError",
    "TransportKind",
    "TransportResolver",
    "UnavailableError",
    "UnsupportedOperationError",
    "resolve",
]
