"""Shared fixtures for kompose-patch tests."""

from pathlib import Path

import pytest
import yaml


@pytest.fixture
def write_manifest(tmp_path):
    """Write a manifest body to tmp_path and return its path."""
    def _write(filename: str, body) -> Path:
        path = tmp_path / filename
        path.write_text(yaml.safe_dump(body, sort_keys=False))
        return path
    return _write


@pytest.fixture
def write_claim(tmp_path):
    """Write a kompose-style PVC artifact for a volume."""
    def _write(volume_name: str, ext: str = "yaml") -> Path:
        path = tmp_path / f"{volume_name}-persistentvolumeclaim.{ext}"
        path.write_text(yaml.safe_dump({
            "apiVersion": "v1",
            "kind": "PersistentVolumeClaim",
            "metadata": {"name": volume_name},
            "spec": {"accessModes": ["ReadWriteOnce"],
                     "resources": {"requests": {"storage": "100Mi"}}},
        }, sort_keys=False))
        return path
    return _write
