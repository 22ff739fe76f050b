"""Claim artifact cleanup and the defensive sweep over leftover PVC volumes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from kompose_patch.analysis.classify import is_managed
from kompose_patch.config import CLAIM_ARTIFACT_EXTENSIONS, CLAIM_ARTIFACT_SUFFIX
from kompose_patch.parser.manifest import PodManifest

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    removed_volumes: list[str] = field(default_factory=list)
    kept_volumes: list[str] = field(default_factory=list)
    dropped_mounts: list[tuple[str, str]] = field(default_factory=list)
    deleted_artifacts: list[Path] = field(default_factory=list)


def claim_artifact_paths(directory: Path, volume_name: str) -> list[Path]:
    return [
        directory / f"{volume_name}{CLAIM_ARTIFACT_SUFFIX}.{ext}"
        for ext in CLAIM_ARTIFACT_EXTENSIONS
    ]


def delete_claim_artifact(directory: Path | None, volume_name: str) -> list[Path]:
    """Delete the standalone claim manifest(s) for a volume.

    A missing file is not an error. Passing directory=None deletes nothing.
    """
    if directory is None:
        return []
    deleted: list[Path] = []
    for path in claim_artifact_paths(directory, volume_name):
        if path.is_file():
            path.unlink()
            logger.debug("deleted claim artifact %s", path)
            deleted.append(path)
    return deleted


def sweep_orphans(manifest: PodManifest, artifact_dir: Path | None = None) -> SweepResult:
    """Drop leftover mounts of PVC volumes at managed file paths.

    No replacement volume is created. The mounts at managed paths are
    dropped; the claim volume itself goes once nothing else mounts it, so
    the manifest holds no dangling reference.
    """
    result = SweepResult()
    for volume in manifest.find_volumes(lambda v: v.is_claim):
        mounts = manifest.find_mounts(volume.name)
        managed = [m for m in mounts if is_managed(m.mount_path)]
        if not managed:
            continue

        logger.warning(
            "%s: dropping leftover mounts of claim volume %r at %s",
            manifest.source, volume.name, ", ".join(m.mount_path for m in managed),
        )
        for mount in managed:
            manifest.remove_mount(mount)
            result.dropped_mounts.append((mount.container, mount.mount_path))
        if len(managed) < len(mounts):
            result.kept_volumes.append(volume.name)
            continue

        manifest.remove_volume(volume.name)
        result.removed_volumes.append(volume.name)
        result.deleted_artifacts += delete_claim_artifact(artifact_dir, volume.name)
    return result
