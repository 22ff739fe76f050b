"""Shell out to kubectl to render ConfigMap and Secret manifests."""

from __future__ import annotations

from pathlib import Path

from kompose_patch.config import DEFAULT_TIMEOUT
from kompose_patch.core.runner import run


def _dry_run_flags() -> list[str]:
    """Render client-side only; nothing reaches a cluster."""
    return ["--dry-run=client", "-o", "yaml"]


def create_configmap_yaml(
    name: str, source: Path, kubectl: str = "kubectl", timeout: int = DEFAULT_TIMEOUT
) -> str:
    """kubectl create configmap <name> --from-file=<source> --dry-run=client -o yaml."""
    cmd = [kubectl, "create", "configmap", name, f"--from-file={source}"]
    cmd += _dry_run_flags()
    return run(cmd, timeout=timeout)


def create_secret_yaml(
    name: str, source: Path, kubectl: str = "kubectl", timeout: int = DEFAULT_TIMEOUT
) -> str:
    """kubectl create secret generic <name> --from-file=<source> --dry-run=client -o yaml."""
    cmd = [kubectl, "create", "secret", "generic", name, f"--from-file={source}"]
    cmd += _dry_run_flags()
    return run(cmd, timeout=timeout)
