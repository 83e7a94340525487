"""Permission probing.

Answers whether the current process may spawn subprocesses and read the
paths used as container engine transports.

Example:
    from src.infra.permissions import PermissionProber

    prober = PermissionProber()
    verdicts = await prober.probe_read_permissions(["/var/run/docker.sock"])
"""

from .prober import PermissionProber
from .types import PermissionReport, PermissionState, PermissionVerdict

__all__ = [
    "PermissionProber",
    "PermissionReport",
    "PermissionState",
    "PermissionVerdict",
]
