"""Subprocess wrapper with error handling."""

from __future__ import annotations

import shutil
import subprocess

from kompose_patch.config import DEFAULT_TIMEOUT
from kompose_patch.errors import KomposePatchError, ToolNotFound


class RunError(KomposePatchError):
    """Raised when a subprocess exits with non-zero status or times out."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"Command {cmd!r} failed (exit {returncode}): {stderr.strip()}"
        )


def require_tool(name: str) -> str:
    """Resolve an executable on PATH, raise ToolNotFound if absent."""
    path = shutil.which(name)
    if path is None:
        raise ToolNotFound(name)
    return path


def run(cmd: list[str], timeout: int = DEFAULT_TIMEOUT, stdin: str | None = None) -> str:
    """Run subprocess, capture stdout, raise on non-zero exit."""
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            input=stdin,
        )
    except subprocess.TimeoutExpired as e:
        raise RunError(cmd, -1, f"timed out after {timeout}s") from e
    if result.returncode != 0:
        raise RunError(cmd, result.returncode, result.stderr)
    return result.stdout
