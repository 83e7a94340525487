"""Settings loading with environment variable substitution."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from .config_data import BridgeSettings
from .config_utils import substitute_env_vars

CONFIG_PATH = Path("runtime-bridge.yaml")
ENV_PREFIX = "RUNTIME_BRIDGE_"

# Fields whose environment override is a comma-separated list
_LIST_FIELDS = frozenset({"probe_args"})


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, value in environ.items():
        if not var.startswith(ENV_PREFIX):
            continue
        key = var[len(ENV_PREFIX) :].lower()
        if key not in BridgeSettings.model_fields:
            logger.debug(f"Ignoring unknown override {var}")
            continue
        if key in _LIST_FIELDS:
            overrides[key] = [part.strip() for part in value.split(",") if part.strip()]
        else:
            overrides[key] = value
    return overrides


def load_settings(
    file_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    *,
    dotenv: bool = True,
) -> BridgeSettings:
    """
    Load settings from an optional YAML file plus environment overrides.

    Args:
        file_path: YAML file with a top-level 'config:' key. Defaults to
                   runtime-bridge.yaml in the working directory when it exists.
        environ: Environment mapping (defaults to os.environ)
        dotenv: Load a .env file from the working directory first

    Returns:
        Validated BridgeSettings

    Raises:
        ValueError: If a required placeholder is unset, the YAML is malformed,
                    or validation fails
        FileNotFoundError: If an explicit file_path does not exist

    Precedence (lowest to highest): model defaults, YAML file,
    RUNTIME_BRIDGE_* environment variables (e.g. RUNTIME_BRIDGE_RUNTIME=podman).
    """
    if dotenv and environ is None:
        load_dotenv(override=False)
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    path = file_path
    if path is None and CONFIG_PATH.exists():
        path = CONFIG_PATH

    if path is not None:
        logger.debug(f"Loading settings from {path}")
        content = substitute_env_vars(path.read_text(), env)
        try:
            loaded = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML: {e}") from e
        if not isinstance(loaded, dict) or "config" not in loaded:
            raise ValueError("Invalid YAML structure: missing 'config' key")
        data.update(loaded["config"] or {})

    overrides = _env_overrides(env)
    if overrides:
        logger.debug(f"Applying {len(overrides)} environment override(s): {sorted(overrides)}")
    data.update(overrides)

    try:
        return BridgeSettings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at the given level.

    Intended for applications embedding the library; the library itself
    never configures handlers.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
