"""Map config and credential file names to ConfigMap/Secret targets."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum

from kompose_patch.config import CONFIG_EXTENSIONS, MANAGED_EXTENSIONS, SECRET_EXTENSIONS


class TargetKind(Enum):
    CONFIG_MAP = "configmap"
    SECRET = "secret"


@dataclass(frozen=True)
class ManagedTarget:
    kind: TargetKind
    name: str
    filename: str  # original base name, used as the subPath

    def volume(self) -> dict:
        """Pod spec volume entry referencing this ConfigMap or Secret."""
        if self.kind is TargetKind.CONFIG_MAP:
            return {"name": self.name, "configMap": {"name": self.name}}
        return {"name": self.name, "secret": {"secretName": self.name}}


def split_extension(basename: str) -> tuple[str, str]:
    """Split on the last dot. Names without a dot have an empty extension."""
    stem, dot, ext = basename.rpartition(".")
    if not dot:
        return basename, ""
    return stem, ext


def classify(basename: str) -> ManagedTarget | None:
    """Classify a file base name.

    .conf/.ini  -> ConfigMap "<stem>-config"
    .key/.crt   -> Secret "<stem>-<ext>-secret"
    anything else (including no extension) -> None
    """
    stem, ext = split_extension(basename)
    if ext in CONFIG_EXTENSIONS:
        return ManagedTarget(TargetKind.CONFIG_MAP, f"{stem}-config", basename)
    if ext in SECRET_EXTENSIONS:
        return ManagedTarget(TargetKind.SECRET, f"{stem}-{ext}-secret", basename)
    return None


def mount_basename(mount_path: str) -> str:
    """Base name of a container mount path, ignoring trailing slashes."""
    return posixpath.basename(mount_path.rstrip("/"))


def classify_path(mount_path: str) -> ManagedTarget | None:
    basename = mount_basename(mount_path)
    if not basename:
        return None
    return classify(basename)


def is_managed(mount_path: str) -> bool:
    """True if the path ends in one of the managed extensions."""
    return split_extension(mount_basename(mount_path))[1] in MANAGED_EXTENSIONS
