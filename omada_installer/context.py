from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from .config import InstallerConfig, default_config


@dataclass(frozen=True)
class HostProfile:
    distribution: str
    codename: str
    cpu_flags: FrozenSet[str] = frozenset()


@dataclass
class PackageArtifact:
    """Files produced by the download/extract phase. Never outlive the run."""

    url: str
    archive_path: Path
    extract_dir: Path
    installer_path: Optional[Path] = None
    version: str = ""

    def on_disk(self) -> bool:
        return self.archive_path.exists() or self.extract_dir.exists()


@dataclass
class ProvisionContext:
    config: InstallerConfig = field(default_factory=default_config)
    cpu_flags: FrozenSet[str] = frozenset()
    host: Optional[HostProfile] = None
    artifact: Optional[PackageArtifact] = None
    current_step: Optional[str] = None

    def require_host(self) -> HostProfile:
        if self.host is None:
            raise RuntimeError("host profile missing; run 20_detect_os first")
        return self.host

    def require_artifact(self) -> PackageArtifact:
        if self.artifact is None:
            raise RuntimeError("package artifact missing; run 50_download_package first")
        return self.artifact

    def require_installer(self) -> Path:
        artifact = self.require_artifact()
        if artifact.installer_path is None:
            raise RuntimeError("installer path missing; run 60_locate_installer first")
        return artifact.installer_path
