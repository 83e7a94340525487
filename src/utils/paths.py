"""Environment-derived filesystem paths."""

from __future__ import annotations

import os
from collections.abc import Mapping

FALLBACK_KUBECONFIG = "/home/unknown/.kube/config"


def get_home_directory(environ: Mapping[str, str] | None = None) -> str | None:
    """Resolve the user's home directory from the environment.

    Prefers $HOME and falls back to %USERPROFILE%.

    Args:
        environ: Environment mapping to read (defaults to os.environ)

    Returns:
        Home directory, or None if neither variable is set
    """
    env = os.environ if environ is None else environ
    return env.get("HOME") or env.get("USERPROFILE") or None


def get_kubeconfig_path(environ: Mapping[str, str] | None = None) -> str:
    """Get the kubeconfig path used as a Kubernetes transport candidate.

    Resolution order:
    - $KUBECONFIG, verbatim
    - <home>/.kube/config
    - a fixed placeholder when no home directory is known

    Args:
        environ: Environment mapping to read (defaults to os.environ)

    Returns:
        Filesystem path of the kubeconfig file
    """
    env = os.environ if environ is None else environ
    override = env.get("KUBECONFIG")
    if override:
        return override

    home = get_home_directory(env)
    if home:
        return f"{home}/.kube/config"
    return FALLBACK_KUBECONFIG
