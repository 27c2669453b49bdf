"""Locating manifests and running ``cargo metadata``."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from .metadata import Metadata, parse_metadata

_MANIFEST_NAME = "Cargo.toml"


class MetadataError(Exception):
    """Running or reading ``cargo metadata`` failed."""


class SubprocessError(MetadataError):
    """``cargo metadata`` exited unsuccessfully."""

    def __init__(self, stderr: str) -> None:
        super().__init__(f"stderr: {stderr}")
        self.stderr = stderr


def find_manifest(current: str | os.PathLike[str]) -> Path | None:
    """Find the nearest ``Cargo.toml`` at or above ``current``."""
    current = Path(current)
    if current.is_dir():
        manifest = current / _MANIFEST_NAME
        if manifest.exists():
            return manifest
    for parent in current.parents:
        manifest = parent / _MANIFEST_NAME
        if manifest.exists():
            return manifest
    return None


def run(manifest_path: str | os.PathLike[str], frozen: bool = False) -> Metadata:
    """Run ``cargo metadata`` for ``manifest_path`` and parse its output."""
    cargo = os.environ.get("CARGO", "cargo")
    cmd = [
        cargo,
        "metadata",
        "--all-features",
        "--format-version",
        "1",
        "--color",
        "never",
        "--manifest-path",
        os.fspath(manifest_path),
    ]
    if frozen:
        cmd.append("--frozen")
    try:
        proc = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as exc:
        raise MetadataError(str(exc)) from exc
    if proc.returncode != 0:
        try:
            stderr = proc.stderr.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MetadataError(str(exc)) from exc
        raise SubprocessError(stderr)
    try:
        return parse_metadata(proc.stdout)
    except ValueError as exc:
        raise MetadataError(str(exc)) from exc