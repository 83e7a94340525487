"""Settings for runtime detection, probing and client construction."""

from .config_data import BridgeSettings
from .config_loader import configure_logging, load_settings
from .config_utils import substitute_env_vars

__all__ = [
    "BridgeSettings",
    "configure_logging",
    "load_settings",
    "substitute_env_vars",
]
