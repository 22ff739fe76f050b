"""Locate compose projects, their config/credential files, and output folders."""

from __future__ import annotations

from pathlib import Path

from kompose_patch.analysis.classify import split_extension
from kompose_patch.config import (
    COMPOSE_FILENAMES,
    CONFIG_EXTENSIONS,
    SECRET_EXTENSIONS,
    ConvertOptions,
)
from kompose_patch.errors import ComposeFileNotFound


def discover_compose_folders(root: Path, options: ConvertOptions | None = None) -> list[Path]:
    """Every folder under root (root included) that holds a compose file.

    Folders inside the generated output tree are skipped.
    """
    options = options or ConvertOptions()
    output_root = root / options.output_dirname
    folders: set[Path] = set()
    for filename in COMPOSE_FILENAMES:
        for compose_file in root.rglob(filename):
            if not compose_file.is_file():
                continue
            folder = compose_file.parent
            if folder == output_root or output_root in folder.parents:
                continue
            folders.add(folder)
    return sorted(folders)


def find_compose_file(folder: Path) -> Path:
    for filename in COMPOSE_FILENAMES:
        candidate = folder / filename
        if candidate.is_file():
            return candidate
    raise ComposeFileNotFound(str(folder), COMPOSE_FILENAMES)


def output_dir_for(root: Path, folder: Path, options: ConvertOptions | None = None) -> Path:
    """root/k8s-manifests for the root itself, root/k8s-manifests/<name> otherwise."""
    options = options or ConvertOptions()
    base = root / options.output_dirname
    if folder.resolve() == root.resolve():
        return base
    return base / folder.name


def find_managed_sources(folder: Path) -> tuple[list[Path], list[Path]]:
    """(config files, credential files) directly inside folder, each sorted."""
    configs: list[Path] = []
    secrets: list[Path] = []
    for path in sorted(folder.iterdir()):
        if not path.is_file():
            continue
        ext = split_extension(path.name)[1]
        if ext in CONFIG_EXTENSIONS:
            configs.append(path)
        elif ext in SECRET_EXTENSIONS:
            secrets.append(path)
    return configs, secrets
