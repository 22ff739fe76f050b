"""Replace PVC volumes that back config/credential files with ConfigMaps and Secrets."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from kompose_patch.analysis.classify import ManagedTarget, TargetKind, classify, mount_basename
from kompose_patch.errors import UnresolvedMountReference
from kompose_patch.parser.manifest import PodManifest, Volume
from kompose_patch.rewrite.orphans import delete_claim_artifact

logger = logging.getLogger(__name__)


@dataclass
class RewiredMount:
    container: str
    mount_path: str
    old_volume: str
    new_volume: str


@dataclass
class RewriteResult:
    removed_volumes: list[str] = field(default_factory=list)
    added_volumes: list[str] = field(default_factory=list)
    rewired_mounts: list[RewiredMount] = field(default_factory=list)
    deleted_artifacts: list[Path] = field(default_factory=list)
    kept_volumes: list[str] = field(default_factory=list)
    skipped_mounts: list[tuple[str, str]] = field(default_factory=list)
    # (claim volume, mount path, replacement name) left alone on a name clash
    collisions: list[tuple[str, str, str]] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed_volumes or self.added_volumes or self.rewired_mounts)


def check_references(manifest: PodManifest) -> None:
    """Raise UnresolvedMountReference if any mount names a missing volume."""
    unresolved = manifest.unresolved_mounts()
    if unresolved:
        raise UnresolvedMountReference(
            manifest.source, [(m.container, m.volume_name) for m in unresolved]
        )


def rewrite_volumes(manifest: PodManifest, artifact_dir: Path | None = None) -> RewriteResult:
    """Rewrite every PVC volume mounted at a config or credential file.

    Volumes are visited in declaration order and their mounts in container
    then mount order. Each managed mount path gets its own ConfigMap/Secret
    volume and a subPath naming the original file. The claim volume is
    dropped (and its artifact deleted from artifact_dir) unless some mount
    path still needs it.
    """
    check_references(manifest)
    result = RewriteResult()

    for volume in manifest.find_volumes(lambda v: v.is_claim):
        mounts = manifest.find_mounts(volume.name)
        plan: list[tuple[str, ManagedTarget]] = []
        still_needed = False

        for mount_path in dict.fromkeys(m.mount_path for m in mounts):
            basename = mount_basename(mount_path)
            if not basename:
                logger.warning(
                    "%s: volume %r has a mount with no file name (%r), skipping",
                    manifest.source, volume.name, mount_path,
                )
                for m in mounts:
                    if m.mount_path == mount_path:
                        result.skipped_mounts.append((m.container, volume.name))
                still_needed = True
                continue
            target = classify(basename)
            if target is None:
                still_needed = True
                continue
            plan.append((mount_path, target))

        # A replacement name already held by an unrelated volume cannot be reused
        for mount_path, target in list(plan):
            existing = manifest.get_volume(target.name)
            if existing is None or _serves(existing, target) or existing.name == volume.name:
                continue
            _skip_collision(manifest, volume.name, mount_path, target, result)
            plan.remove((mount_path, target))
            still_needed = True

        if still_needed:
            # The claim stays, so a replacement may not take its name
            for mount_path, target in list(plan):
                if target.name == volume.name:
                    _skip_collision(manifest, volume.name, mount_path, target, result)
                    plan.remove((mount_path, target))

        if not plan:
            continue

        if still_needed:
            logger.warning(
                "%s: claim volume %r still backs other paths, keeping it",
                manifest.source, volume.name,
            )
            result.kept_volumes.append(volume.name)
        else:
            manifest.remove_volume(volume.name)
            result.removed_volumes.append(volume.name)
            result.deleted_artifacts += delete_claim_artifact(artifact_dir, volume.name)

        for mount_path, target in plan:
            if manifest.add_volume(target.volume()):
                result.added_volumes.append(target.name)
            for mount in mounts:
                if mount.mount_path != mount_path:
                    continue
                manifest.rename_mount(mount, target.name)
                manifest.set_sub_path(mount, target.filename)
                result.rewired_mounts.append(
                    RewiredMount(mount.container, mount_path, volume.name, target.name)
                )

    return result


def _serves(existing: Volume, target: ManagedTarget) -> bool:
    """True if an existing volume already points at the target ConfigMap/Secret."""
    source = "configMap" if target.kind is TargetKind.CONFIG_MAP else "secret"
    return existing.source == source and existing.ref == target.name


def _skip_collision(
    manifest: PodManifest,
    volume_name: str,
    mount_path: str,
    target: ManagedTarget,
    result: RewriteResult,
) -> None:
    logger.warning(
        "%s: cannot rewrite %s on claim volume %r, name %r is taken by another volume",
        manifest.source, mount_path, volume_name, target.name,
    )
    result.collisions.append((volume_name, mount_path, target.name))
