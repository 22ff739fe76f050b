"""Pod manifest loading, structured volume/mount access, and serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal

import yaml

from kompose_patch.config import POD_SPEC_PATHS
from kompose_patch.errors import MalformedManifest

SourceKind = Literal["persistentVolumeClaim", "configMap", "secret", "other"]


@dataclass
class Volume:
    name: str
    source: SourceKind
    ref: str | None  # claimName, ConfigMap name or secretName
    raw: dict = field(repr=False, compare=False)

    @property
    def is_claim(self) -> bool:
        return self.source == "persistentVolumeClaim"

    @classmethod
    def from_dict(cls, raw: dict) -> Volume:
        if "persistentVolumeClaim" in raw:
            return cls(raw.get("name", ""), "persistentVolumeClaim",
                       (raw["persistentVolumeClaim"] or {}).get("claimName"), raw)
        if "configMap" in raw:
            return cls(raw.get("name", ""), "configMap",
                       (raw["configMap"] or {}).get("name"), raw)
        if "secret" in raw:
            return cls(raw.get("name", ""), "secret",
                       (raw["secret"] or {}).get("secretName"), raw)
        return cls(raw.get("name", ""), "other", None, raw)


@dataclass
class VolumeMount:
    """View over one volumeMounts entry. Mutations write through to the document."""

    container: str
    raw: dict = field(repr=False)

    @property
    def volume_name(self) -> str:
        return self.raw.get("name", "")

    @property
    def mount_path(self) -> str:
        return self.raw.get("mountPath") or ""

    @property
    def sub_path(self) -> str | None:
        return self.raw.get("subPath")


@dataclass
class Container:
    name: str
    volume_mounts: list[VolumeMount]
    raw: dict = field(repr=False)


class PodManifest:
    """A single manifest document and the pod spec inside it."""

    def __init__(self, body: dict, source: str = "<string>") -> None:
        self.body = body
        self.source = source
        self.spec = _locate_pod_spec(body, source)
        _check_structure(self.spec, source)

    @classmethod
    def from_yaml(cls, text: str, source: str = "<string>") -> PodManifest:
        try:
            body = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MalformedManifest(source, f"invalid YAML ({e})") from e
        if not isinstance(body, dict):
            raise MalformedManifest(source, "document is not a mapping")
        return cls(body, source)

    @classmethod
    def load(cls, path: Path) -> PodManifest:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedManifest(str(path), "not UTF-8 text") from e
        return cls.from_yaml(text, str(path))

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.body, sort_keys=False, default_flow_style=False)

    def save(self, path: Path | None = None) -> None:
        target = path or Path(self.source)
        target.write_text(self.to_yaml(), encoding="utf-8")

    # --- read access ---

    @property
    def volumes(self) -> list[Volume]:
        return [Volume.from_dict(v) for v in self.spec.get("volumes") or []]

    @property
    def containers(self) -> list[Container]:
        containers: list[Container] = []
        for raw in self.spec.get("containers") or []:
            name = raw.get("name", "")
            mounts = [VolumeMount(name, m) for m in raw.get("volumeMounts") or []]
            containers.append(Container(name, mounts, raw))
        return containers

    def find_volumes(self, predicate: Callable[[Volume], bool]) -> list[Volume]:
        return [v for v in self.volumes if predicate(v)]

    def get_volume(self, name: str) -> Volume | None:
        for v in self.volumes:
            if v.name == name:
                return v
        return None

    def find_mounts(self, volume_name: str) -> list[VolumeMount]:
        """All mounts of a volume, in container order then mount order."""
        return [
            m
            for c in self.containers
            for m in c.volume_mounts
            if m.volume_name == volume_name
        ]

    def unresolved_mounts(self) -> list[VolumeMount]:
        names = {v.name for v in self.volumes}
        return [
            m
            for c in self.containers
            for m in c.volume_mounts
            if m.volume_name not in names
        ]

    # --- mutation ---

    def add_volume(self, volume: dict) -> bool:
        """Append a volume entry. Returns False if the name is already taken."""
        if self.get_volume(volume["name"]) is not None:
            return False
        if self.spec.get("volumes") is None:
            self.spec["volumes"] = []
        self.spec["volumes"].append(volume)
        return True

    def remove_volume(self, name: str) -> bool:
        volumes = self.spec.get("volumes") or []
        kept = [v for v in volumes if v.get("name") != name]
        if len(kept) == len(volumes):
            return False
        self.spec["volumes"] = kept
        return True

    def rename_mount(self, mount: VolumeMount, volume_name: str) -> None:
        mount.raw["name"] = volume_name

    def set_sub_path(self, mount: VolumeMount, sub_path: str) -> None:
        mount.raw["subPath"] = sub_path

    def remove_mount(self, mount: VolumeMount) -> None:
        for raw in self.spec.get("containers") or []:
            mounts = raw.get("volumeMounts") or []
            kept = [m for m in mounts if m is not mount.raw]
            if len(kept) != len(mounts):
                raw["volumeMounts"] = kept
                return


def _locate_pod_spec(body: dict, source: str) -> dict:
    """Walk to the pod spec for the document's kind."""
    kind = str(body.get("kind", "")).lower()
    path = POD_SPEC_PATHS.get(kind)
    if path is None:
        raise MalformedManifest(source, f"unsupported kind {body.get('kind')!r}")

    node: object = body
    for part in path.split("."):
        if not isinstance(node, dict) or not isinstance(node.get(part), dict):
            raise MalformedManifest(source, f"missing {path}")
        node = node[part]
    assert isinstance(node, dict)
    return node


_VOLUME_SOURCES: dict[str, str] = {
    "persistentVolumeClaim": "claimName",
    "configMap": "name",
    "secret": "secretName",
}


def _check_structure(spec: dict, source: str) -> None:
    for key in ("volumes", "containers"):
        value = spec.get(key)
        if value is not None and not isinstance(value, list):
            raise MalformedManifest(source, f"{key} is not a list")
        for item in value or []:
            if not isinstance(item, dict):
                raise MalformedManifest(source, f"{key} entry is not a mapping")

    for volume in spec.get("volumes") or []:
        _check_str(volume, "name", source, "volume", required=True)
        for kind, ref_key in _VOLUME_SOURCES.items():
            ref = volume.get(kind)
            if ref is None:
                continue
            if not isinstance(ref, dict):
                raise MalformedManifest(source, f"volume {volume['name']!r}: {kind} is not a mapping")
            _check_str(ref, ref_key, source, f"volume {volume['name']!r} {kind}")

    for container in spec.get("containers") or []:
        mounts = container.get("volumeMounts")
        if mounts is not None and not isinstance(mounts, list):
            raise MalformedManifest(source, "volumeMounts is not a list")
        for m in mounts or []:
            if not isinstance(m, dict):
                raise MalformedManifest(source, "volumeMounts entry is not a mapping")
            _check_str(m, "name", source, "volumeMount", required=True)
            _check_str(m, "mountPath", source, "volumeMount")
            _check_str(m, "subPath", source, "volumeMount")


def _check_str(entry: dict, key: str, source: str, what: str, required: bool = False) -> None:
    value = entry.get(key)
    if value is None and not required:
        return
    if not isinstance(value, str):
        raise MalformedManifest(source, f"{what} {key} is not a string: {value!r}")
