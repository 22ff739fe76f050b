"""Shell out to the kompose CLI."""

from __future__ import annotations

from pathlib import Path

from kompose_patch.config import DEFAULT_TIMEOUT
from kompose_patch.core.runner import run


def kompose_convert(
    compose_file: Path,
    output_dir: Path,
    kompose: str = "kompose",
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """kompose convert -f <compose_file> -o <output_dir>/ -> kompose's stdout.

    kompose treats an -o value ending in a slash as a directory and writes
    one file per resource into it.
    """
    cmd = [kompose, "convert", "-f", str(compose_file), "-o", f"{output_dir}/"]
    return run(cmd, timeout=timeout)
