"""Typed engine controllers.

Each controller speaks one engine's native API and returns parsed
ContainerInfo objects instead of raw results.
"""

from .controller import ContainerInfo, CreateOptions, EngineController
from .helpers import get_engine_controller, get_namespace

__all__ = [
    "ContainerInfo",
    "CreateOptions",
    "EngineController",
    "get_engine_controller",
    "get_namespace",
]
