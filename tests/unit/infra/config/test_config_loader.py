"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.infra.config.config_loader import load_settings
from src.infra.config.config_utils import substitute_env_vars
from src.infra.runtimes.identity import RuntimeIdentity


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "runtime-bridge.yaml"
    path.write_text(content)
    return path


class TestSubstituteEnvVars:
    """Tests for placeholder substitution."""

    def test_required_variable(self) -> None:
        """Test ${VAR} is replaced."""
        assert substitute_env_vars("runtime: ${RT}", {"RT": "podman"}) == "runtime: podman"

    def test_default_value(self) -> None:
        """Test ${VAR:-default} falls back."""
        assert substitute_env_vars("${MISSING:-docker}", {}) == "docker"

    def test_missing_required_raises(self) -> None:
        """Test a missing ${VAR} raises ValueError."""
        with pytest.raises(ValueError, match="RT not set"):
            substitute_env_vars("${RT}", {})

    def test_custom_error_message(self) -> None:
        """Test ${VAR:?msg} includes the message."""
        with pytest.raises(ValueError, match="pick a runtime"):
            substitute_env_vars("${RT:?pick a runtime}", {})


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self) -> None:
        """Test defaults apply when no file and no overrides exist."""
        settings = load_settings(None, environ={}, dotenv=False)

        assert settings.runtime is None
        assert settings.allow_subprocess is True
        assert settings.preflight is True
        assert settings.probe_args == ["--help"]
        assert settings.log_level == "INFO"

    def test_yaml_with_substitution(self, tmp_path: Path) -> None:
        """Test YAML values and placeholders are loaded."""
        path = _write(
            tmp_path,
            "config:\n  runtime: ${RT:-podman}\n  preflight: false\n  log_level: debug\n",
        )

        settings = load_settings(path, environ={})

        assert settings.runtime is RuntimeIdentity.PODMAN
        assert settings.preflight is False
        assert settings.log_level == "DEBUG"

    def test_environment_overrides_yaml(self, tmp_path: Path) -> None:
        """Test RUNTIME_BRIDGE_* variables take precedence over the file."""
        path = _write(tmp_path, "config:\n  runtime: docker\n")
        environ = {
            "RUNTIME_BRIDGE_RUNTIME": "lxc-lxd",
            "RUNTIME_BRIDGE_ALLOW_SUBPROCESS": "false",
            "RUNTIME_BRIDGE_PROBE_ARGS": "version, --format=json",
            "RUNTIME_BRIDGE_UNKNOWN": "ignored",
        }

        settings = load_settings(path, environ=environ)

        assert settings.runtime is RuntimeIdentity.LXC_LXD
        assert settings.allow_subprocess is False
        assert settings.probe_args == ["version", "--format=json"]

    def test_missing_config_key(self, tmp_path: Path) -> None:
        """Test a file without the top-level config key is rejected."""
        path = _write(tmp_path, "runtime: docker\n")

        with pytest.raises(ValueError, match="missing 'config' key"):
            load_settings(path, environ={})

    def test_invalid_runtime(self, tmp_path: Path) -> None:
        """Test an unknown runtime name fails validation."""
        path = _write(tmp_path, "config:\n  runtime: vagrant\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(path, environ={})

    def test_unknown_field(self, tmp_path: Path) -> None:
        """Test unknown settings are rejected."""
        path = _write(tmp_path, "config:\n  retries: 3\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_settings(path, environ={})

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        """Test a YAML syntax error becomes ValueError."""
        path = _write(tmp_path, "config: [unclosed\n")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_settings(path, environ={})

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test an explicit missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml", environ={})
