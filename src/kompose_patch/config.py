"""Classification rules, file-name conventions, and settings."""

from __future__ import annotations

from dataclasses import dataclass

# Extensions served from a ConfigMap, mounted one file per volume via subPath
CONFIG_EXTENSIONS: frozenset[str] = frozenset({"conf", "ini"})

# Extensions served from a Secret; the extension is kept in the resource name
SECRET_EXTENSIONS: frozenset[str] = frozenset({"key", "crt"})

MANAGED_EXTENSIONS: frozenset[str] = CONFIG_EXTENSIONS | SECRET_EXTENSIONS

# Compose file names, in lookup priority order
COMPOSE_FILENAMES: tuple[str, ...] = (
    "compose.yaml",
    "docker-compose.yaml",
    "compose.yml",
    "docker-compose.yml",
)

# Where generated manifests go, relative to the compose root
OUTPUT_DIRNAME = "k8s-manifests"

# kompose names pod manifests <service>-pod.yaml
POD_MANIFEST_SUFFIXES: tuple[str, ...] = ("-pod.yaml",)

# kompose writes one <volume>-persistentvolumeclaim.yaml per claim
CLAIM_ARTIFACT_SUFFIX = "-persistentvolumeclaim"
CLAIM_ARTIFACT_EXTENSIONS: tuple[str, ...] = ("yaml", "yml")

# Where the pod spec lives, per kind (dot-paths from the document root)
POD_SPEC_PATHS: dict[str, str] = {
    "pod": "spec",
    "deployment": "spec.template.spec",
    "statefulset": "spec.template.spec",
    "daemonset": "spec.template.spec",
    "replicaset": "spec.template.spec",
    "job": "spec.template.spec",
    "cronjob": "spec.jobTemplate.spec.template.spec",
}

# Default subprocess timeout in seconds
DEFAULT_TIMEOUT = 60


@dataclass
class ConvertOptions:
    """Settings threaded through every step of a conversion run."""

    output_dirname: str = OUTPUT_DIRNAME
    manifest_suffixes: tuple[str, ...] = POD_MANIFEST_SUFFIXES
    dry_run: bool = False
    kompose_bin: str = "kompose"
    kubectl_bin: str = "kubectl"
    timeout: int = DEFAULT_TIMEOUT
