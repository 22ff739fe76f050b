"""Exception types for manifest rewriting and conversion."""

from __future__ import annotations


class KomposePatchError(Exception):
    """Base class for all kompose-patch failures."""


class MalformedManifest(KomposePatchError):
    """Raised when a manifest cannot be parsed into a pod spec."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed manifest {source}: {reason}")


class UnresolvedMountReference(KomposePatchError):
    """Raised when a volumeMount names a volume absent from the manifest."""

    def __init__(self, source: str, references: list[tuple[str, str]]) -> None:
        self.source = source
        # (container name, volume name) pairs
        self.references = references
        names = ", ".join(f"{c}->{v}" for c, v in references)
        super().__init__(f"Unresolved volume references in {source}: {names}")


class ComposeFileNotFound(KomposePatchError):
    """Raised when a folder holds no compose file."""

    def __init__(self, folder: str, tried: tuple[str, ...]) -> None:
        self.folder = folder
        super().__init__(f"No compose file found in {folder}. Tried: {', '.join(tried)}")


class ToolNotFound(KomposePatchError):
    """Raised when a required executable is not on PATH."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"{tool} is not installed. Please install it first.")
