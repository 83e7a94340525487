"""Pydantic model for runtime-bridge settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.infra.constants import DEFAULT_CONSTANTS
from src.infra.runtimes.identity import RuntimeIdentity

_LOG_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})


class BridgeSettings(BaseModel):
    """Settings consumed by the detector, prober, resolver and factory.

    Example:
        ```yaml
        config:
          runtime: podman
          preflight: false
          log_level: DEBUG
        ```
    """

    model_config = ConfigDict(extra="forbid")

    runtime: RuntimeIdentity | None = Field(
        default=None,
        description="Runtime to use instead of auto-detection",
    )
    allow_subprocess: bool = Field(
        default=True,
        description="When false, subprocess permission is reported as denied",
    )
    preflight: bool = Field(
        default=True,
        description="Re-probe each CLI argument vector before running it",
    )
    probe_args: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CONSTANTS.BINARY_PROBE_ARGS),
        description="Arguments for the binary presence probe",
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the stderr log sink",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level
