"""Shared fixtures for runtime-bridge tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.infra.permissions.prober import PermissionProber
from src.infra.permissions.types import PermissionState, PermissionVerdict
from src.infra.shell.runner import CommandRunner
from src.infra.shell.types import CommandResult


@pytest.fixture
def mock_prober() -> MagicMock:
    """A prober that grants run permission, finds every binary, reads nothing."""
    prober = MagicMock(spec=PermissionProber)
    prober.probe_subprocess_permission.return_value = PermissionVerdict(
        name="run", state=PermissionState.GRANTED
    )
    prober.probe_subprocess_capability = AsyncMock(
        side_effect=lambda binary, args: PermissionVerdict(
            name=" ".join([binary, *args]), state=PermissionState.GRANTED
        )
    )
    prober.probe_read_permissions = AsyncMock(return_value=[])
    return prober


@pytest.fixture
def mock_runner() -> MagicMock:
    """A command runner whose commands all exit 0 with empty output."""
    runner = MagicMock(spec=CommandRunner)
    runner.run = AsyncMock(return_value=CommandResult(success=True))
    runner.run_checked = AsyncMock(return_value="")
    return runner
