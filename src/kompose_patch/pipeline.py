"""Per-folder conversion and per-manifest rewrite orchestration."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from kompose_patch.analysis.classify import classify, split_extension
from kompose_patch.config import ConvertOptions
from kompose_patch.core.discovery import (
    discover_compose_folders,
    find_compose_file,
    find_managed_sources,
    output_dir_for,
)
from kompose_patch.core.kompose import kompose_convert
from kompose_patch.core.kubectl import create_configmap_yaml, create_secret_yaml
from kompose_patch.core.runner import RunError, require_tool
from kompose_patch.diff.engine import FieldChange, diff_bodies
from kompose_patch.errors import (
    ComposeFileNotFound,
    KomposePatchError,
    MalformedManifest,
    ToolNotFound,
    UnresolvedMountReference,
)
from kompose_patch.parser.manifest import PodManifest
from kompose_patch.rewrite.orphans import (
    SweepResult,
    claim_artifact_paths,
    delete_claim_artifact,
    sweep_orphans,
)
from kompose_patch.rewrite.volumes import RewriteResult, rewrite_volumes

logger = logging.getLogger(__name__)

Status = Literal["created", "patched", "deleted", "warning", "error"]


@dataclass
class StatusEvent:
    status: Status
    message: str


@dataclass
class ManifestReport:
    path: Path
    rewrite: RewriteResult | None = None
    sweep: SweepResult | None = None
    changes: list[FieldChange] = field(default_factory=list)
    events: list[StatusEvent] = field(default_factory=list)
    error: KomposePatchError | OSError | None = None
    # claim volumes (and claim names) the manifest still mounts
    claims_in_use: set[str] = field(default_factory=set)
    released_claims: list[str] = field(default_factory=list)
    deleted_artifacts: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return bool(self.changes)


@dataclass
class FolderReport:
    folder: Path
    output_dir: Path | None = None
    events: list[StatusEvent] = field(default_factory=list)
    manifests: list[ManifestReport] = field(default_factory=list)
    error: KomposePatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and all(m.ok for m in self.manifests)


def find_manifests(directory: Path, options: ConvertOptions) -> list[Path]:
    """Manifest files in directory matching any configured suffix, sorted."""
    found: set[Path] = set()
    for suffix in options.manifest_suffixes:
        found.update(p for p in directory.glob(f"*{suffix}") if p.is_file())
    return sorted(found)


def patch_manifest(
    path: Path, options: ConvertOptions | None = None, release_claims: bool = True
) -> ManifestReport:
    """Rewrite one manifest in place, then delete the claim artifacts it orphans.

    Malformed, unreadable or unwritable manifests and manifests with
    unresolved mount references are reported and left untouched. Claim
    artifacts are only deleted after the manifest is saved. With
    release_claims=False the caller deletes them (see patch_directory). In
    dry-run mode nothing is written or deleted; the report still lists what
    would change.
    """
    options = options or ConvertOptions()
    report = ManifestReport(path)

    try:
        manifest = PodManifest.load(path)
    except (MalformedManifest, OSError) as e:
        return _failed(report, e)

    report.claims_in_use = _claim_names(manifest)
    before = copy.deepcopy(manifest.body)
    try:
        report.rewrite = rewrite_volumes(manifest)
    except UnresolvedMountReference as e:
        return _failed(report, e)
    report.sweep = sweep_orphans(manifest)
    report.changes = diff_bodies(before, manifest.body)

    for name in report.rewrite.kept_volumes + report.sweep.kept_volumes:
        report.events.append(StatusEvent(
            "warning", f"Kept claim volume {name!r} in {path}: it still backs other paths"))
    for volume_name, mount_path, target in report.rewrite.collisions:
        report.events.append(StatusEvent(
            "warning", f"Left {mount_path} on {volume_name!r} in {path}: {target!r} is taken"))
    for name in report.sweep.removed_volumes:
        report.events.append(StatusEvent(
            "warning", f"Removed leftover claim volume {name!r} from {path}"))

    if report.changed:
        if options.dry_run:
            report.events.append(StatusEvent("patched", f"Would patch {path}"))
        else:
            try:
                manifest.save(path)
            except OSError as e:
                return _failed(report, e)
            report.events.append(StatusEvent(
                "patched", f"Patched {path} ({len(report.changes)} field changes)"))

    report.claims_in_use = _claim_names(manifest)
    report.released_claims = report.rewrite.removed_volumes + report.sweep.removed_volumes
    if release_claims:
        release_claim_artifacts(report, path.parent, report.claims_in_use, options)
    return report


def _failed(report: ManifestReport, error: KomposePatchError | OSError) -> ManifestReport:
    logger.debug("skipping %s: %s", report.path, error)
    report.error = error
    report.events.append(StatusEvent("error", str(error)))
    return report


def _claim_names(manifest: PodManifest) -> set[str]:
    """Volume and claim names of every PVC volume in the manifest."""
    names: set[str] = set()
    for volume in manifest.find_volumes(lambda v: v.is_claim):
        names.add(volume.name)
        if volume.ref:
            names.add(volume.ref)
    return names


def release_claim_artifacts(
    report: ManifestReport, directory: Path, in_use: set[str], options: ConvertOptions
) -> None:
    """Delete claim artifacts of the report's removed volumes not listed in in_use."""
    for name in report.released_claims:
        if name in in_use:
            logger.debug("claim %r is still mounted elsewhere, keeping its artifact", name)
            continue
        if options.dry_run:
            artifacts = [p for p in claim_artifact_paths(directory, name) if p.is_file()]
        else:
            artifacts = delete_claim_artifact(directory, name)
        verb = "Would delete" if options.dry_run else "Deleted"
        for artifact in artifacts:
            report.deleted_artifacts.append(artifact)
            report.events.append(StatusEvent("deleted", f"{verb} {artifact}"))


def patch_directory(directory: Path, options: ConvertOptions | None = None) -> list[ManifestReport]:
    """Run the rewrite pass over every manifest in directory, one at a time.

    A claim artifact is deleted only when no manifest in the directory still
    mounts that claim.
    """
    options = options or ConvertOptions()
    reports = [
        patch_manifest(path, options, release_claims=False)
        for path in find_manifests(directory, options)
    ]
    in_use: set[str] = set()
    for report in reports:
        in_use |= report.claims_in_use
    for report in reports:
        if report.ok:
            release_claim_artifacts(report, directory, in_use, options)
    return reports


def generate_config_resources(
    folder: Path, output_dir: Path, options: ConvertOptions
) -> list[StatusEvent]:
    """Render a ConfigMap or Secret manifest for each config/credential file."""
    events: list[StatusEvent] = []
    configs, secrets = find_managed_sources(folder)

    for source in configs:
        target = classify(source.name)
        assert target is not None
        text = create_configmap_yaml(
            target.name, source, kubectl=options.kubectl_bin, timeout=options.timeout)
        stem, _ = split_extension(source.name)
        (output_dir / f"{stem}-configmap.yaml").write_text(text, encoding="utf-8")
        events.append(StatusEvent("created", f"Created ConfigMap manifest for {source}"))

    for source in secrets:
        target = classify(source.name)
        assert target is not None
        text = create_secret_yaml(
            target.name, source, kubectl=options.kubectl_bin, timeout=options.timeout)
        (output_dir / f"{target.name}.yaml").write_text(text, encoding="utf-8")
        events.append(StatusEvent("created", f"Created Secret manifest for {source}"))

    return events


def convert_folder(root: Path, folder: Path, options: ConvertOptions | None = None) -> FolderReport:
    """kompose convert, ConfigMap/Secret generation, then the rewrite pass.

    Any tool failure aborts this folder only.
    """
    options = options or ConvertOptions()
    report = FolderReport(folder)
    try:
        compose_file = find_compose_file(folder)
        require_tool(options.kompose_bin)
        require_tool(options.kubectl_bin)

        report.output_dir = output_dir_for(root, folder, options)
        report.output_dir.mkdir(parents=True, exist_ok=True)

        kompose_convert(
            compose_file, report.output_dir, kompose=options.kompose_bin, timeout=options.timeout)
        report.events.append(StatusEvent("created", f"Kompose conversion complete for {compose_file}"))

        report.events += generate_config_resources(folder, report.output_dir, options)
    except (ComposeFileNotFound, ToolNotFound, RunError) as e:
        report.error = e
        report.events.append(StatusEvent("error", str(e)))
        return report

    report.manifests = patch_directory(report.output_dir, options)
    return report


def convert_tree(root: Path, options: ConvertOptions | None = None) -> list[FolderReport]:
    """Convert every compose folder under root, sequentially."""
    options = options or ConvertOptions()
    return [convert_folder(root, folder, options) for folder in discover_compose_folders(root, options)]
