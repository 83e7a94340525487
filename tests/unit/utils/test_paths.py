"""Unit tests for environment path helpers."""

from __future__ import annotations

from src.utils.paths import FALLBACK_KUBECONFIG, get_home_directory, get_kubeconfig_path


def test_kubeconfig_override_wins() -> None:
    """Test KUBECONFIG is used verbatim."""
    env = {"KUBECONFIG": "/etc/kube/admin.conf", "HOME": "/root"}

    assert get_kubeconfig_path(env) == "/etc/kube/admin.conf"


def test_kubeconfig_from_home() -> None:
    """Test the default location under HOME."""
    assert get_kubeconfig_path({"HOME": "/home/dev"}) == "/home/dev/.kube/config"


def test_kubeconfig_from_userprofile() -> None:
    """Test USERPROFILE is used when HOME is unset."""
    assert get_kubeconfig_path({"USERPROFILE": "C:/Users/dev"}) == "C:/Users/dev/.kube/config"


def test_kubeconfig_fallback() -> None:
    """Test the placeholder path when no home is known."""
    assert get_kubeconfig_path({}) == FALLBACK_KUBECONFIG


def test_empty_home_is_ignored() -> None:
    """Test an empty HOME falls through to USERPROFILE."""
    assert get_home_directory({"HOME": "", "USERPROFILE": "/u"}) == "/u"
