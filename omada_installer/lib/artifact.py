from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import List
from urllib.parse import urlparse

from ..context import PackageArtifact
from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"

_VERSION_RE = re.compile(r"v\d+(?:\.\d+)+")
# 1-based field of the '_'-separated name, as laid out in vendor archive names
# like Omada_SDN_Controller_v5.x_linux_x64.deb.
_VERSION_FIELD = 4


def plan_artifact(url: str, *, scratch_dir: str, extract_dir: str) -> PackageArtifact:
    name = Path(urlparse(url).path).name or "package.zip"
    return PackageArtifact(
        url=url,
        archive_path=Path(scratch_dir) / name,
        extract_dir=Path(extract_dir),
    )


def download(artifact: PackageArtifact) -> CmdResult:
    """Fetch the archive with a progress bar, following redirects."""

    artifact.archive_path.parent.mkdir(parents=True, exist_ok=True)
    return run_cmd(
        ["curl", "-#", "-fL", "-o", str(artifact.archive_path), artifact.url],
        check=False,
        capture=False,
    )


def extract(artifact: PackageArtifact) -> CmdResult:
    """Unpack into extract_dir, overwriting without prompting."""

    artifact.extract_dir.mkdir(parents=True, exist_ok=True)
    return run_cmd(
        ["unzip", "-qo", str(artifact.archive_path), "-d", str(artifact.extract_dir)],
        check=False,
    )


def find_installers(extract_dir: Path, pattern: str = "*.deb") -> List[Path]:
    """Top-level files only, sorted by name."""
    return sorted(p for p in extract_dir.glob(pattern) if p.is_file())


def list_tree(root: Path) -> List[str]:
    """Recursive listing relative to root, for diagnostics."""

    if not root.exists():
        return []
    lines = []
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root)
        lines.append(f"{rel}/" if p.is_dir() else str(rel))
    return lines


def parse_version(filename: str) -> str:
    """Version token from an installer file name.

    Tries a 'v1.2.3' pattern first, then the positional field, then gives up
    with UNKNOWN_VERSION. Never raises.
    """

    name = Path(filename).name
    m = _VERSION_RE.search(name)
    if m:
        return m.group(0)

    stem = name[: -len(".deb")] if name.endswith(".deb") else name
    fields = stem.split("_")
    if len(fields) >= _VERSION_FIELD and fields[_VERSION_FIELD - 1]:
        return fields[_VERSION_FIELD - 1]
    return UNKNOWN_VERSION


def remove_artifact(artifact: PackageArtifact) -> None:
    """Delete the archive and extraction directory. Safe to call repeatedly."""

    artifact.archive_path.unlink(missing_ok=True)
    if artifact.extract_dir.is_dir():
        shutil.rmtree(artifact.extract_dir)
    elif artifact.extract_dir.exists():
        artifact.extract_dir.unlink()
