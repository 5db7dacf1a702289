from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = "/etc/omada-installer.yaml"

OMADA_PACKAGE_URL = (
    "https://static.tp-link.com/upload/beta/2025/202505/20250514/"
    "Omada_SDN_Controller_v5.15.24.14_pre-release_linux_x64_deb.zip"
)

DEFAULTS: Dict[str, Any] = {
    "host": {
        # MongoDB 5.0+ refuses to start without AVX.
        "required_cpu_flag": "avx",
        # Substring of the OS description -> repository codename. Order matters.
        "supported_releases": {
            "Ubuntu 20.04": "focal",
            "Ubuntu 22.04": "jammy",
            "Ubuntu 24.04": "noble",
        },
    },
    "prerequisites": ["gnupg", "curl", "unzip"],
    "mongodb": {
        "key_url": "https://www.mongodb.org/static/pgp/server-8.0.asc",
        "keyring_path": "/usr/share/keyrings/mongodb-server-8.0.gpg",
        "sources_list_path": "/etc/apt/sources.list.d/mongodb-org-8.0.list",
        "repo_url": "https://repo.mongodb.org/apt/ubuntu",
        "series": "8.0",
        "component": "multiverse",
        "architectures": ["amd64", "arm64"],
    },
    "omada": {
        "package_url": OMADA_PACKAGE_URL,
        "scratch_dir": "/tmp",
        "extract_dir": "omada_controller_extracted",
        "installer_glob": "*.deb",
        "web_port": 8043,
    },
    "dependencies": [
        {"name": "MongoDB 8.0", "package": "mongodb-org"},
        {"name": "OpenJDK 21 JRE (headless)", "package": "openjdk-21-jre-headless"},
        {"name": "JSVC", "package": "jsvc"},
    ],
}


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    # Mappings merge key by key; everything else (lists included) replaces.
    out = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


@dataclass(frozen=True)
class InstallerConfig:
    raw: Dict[str, Any]

    @property
    def required_cpu_flag(self) -> str:
        return str((self.raw.get("host") or {}).get("required_cpu_flag") or "avx").lower()

    @property
    def supported_releases(self) -> Dict[str, str]:
        releases = (self.raw.get("host") or {}).get("supported_releases") or {}
        return {str(k): str(v) for k, v in releases.items()}

    @property
    def prerequisites(self) -> List[str]:
        return [str(p) for p in (self.raw.get("prerequisites") or [])]

    @property
    def mongodb_key_url(self) -> str:
        return str((self.raw.get("mongodb") or {})["key_url"])

    @property
    def keyring_path(self) -> str:
        return str((self.raw.get("mongodb") or {})["keyring_path"])

    @property
    def sources_list_path(self) -> str:
        return str((self.raw.get("mongodb") or {})["sources_list_path"])

    def mongodb_source_line(self, codename: str) -> str:
        m = self.raw.get("mongodb") or {}
        arch = ",".join(m.get("architectures") or [])
        return (
            f"deb [ arch={arch} signed-by={m['keyring_path']} ] "
            f"{m['repo_url']} {codename}/mongodb-org/{m['series']} {m['component']}"
        )

    @property
    def package_url(self) -> str:
        return str((self.raw.get("omada") or {})["package_url"])

    @property
    def scratch_dir(self) -> str:
        return str((self.raw.get("omada") or {}).get("scratch_dir") or "/tmp")

    @property
    def extract_dir(self) -> str:
        name = str((self.raw.get("omada") or {}).get("extract_dir") or "omada_controller_extracted")
        return str(Path(self.scratch_dir) / name)

    @property
    def installer_glob(self) -> str:
        return str((self.raw.get("omada") or {}).get("installer_glob") or "*.deb")

    @property
    def web_port(self) -> int:
        return int((self.raw.get("omada") or {}).get("web_port") or 8043)

    @property
    def dependencies(self) -> List[Tuple[str, str]]:
        """Ordered (display name, package) pairs."""
        deps = []
        for entry in self.raw.get("dependencies") or []:
            if not isinstance(entry, dict) or not entry.get("package"):
                raise ValueError(f"dependency entries need a 'package' key: {entry!r}")
            deps.append((str(entry.get("name") or entry["package"]), str(entry["package"])))
        return deps

    def validate(self) -> "InstallerConfig":
        """Read every setting once so a bad file fails before the host is touched."""

        for section in ("host", "mongodb", "omada"):
            if not isinstance(self.raw.get(section), dict):
                raise ConfigError(f"config section '{section}' must be a mapping")
        for section in ("prerequisites", "dependencies"):
            if not isinstance(self.raw.get(section), list):
                raise ConfigError(f"config section '{section}' must be a list")
        if not isinstance(self.raw["host"].get("supported_releases"), dict):
            raise ConfigError("host.supported_releases must be a mapping of OS description -> codename")

        try:
            for name in (
                "required_cpu_flag",
                "supported_releases",
                "prerequisites",
                "mongodb_key_url",
                "keyring_path",
                "sources_list_path",
                "package_url",
                "extract_dir",
                "installer_glob",
                "web_port",
                "dependencies",
            ):
                getattr(self, name)
            self.mongodb_source_line("codename")
        except KeyError as e:
            raise ConfigError(f"config is missing required key {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"invalid config: {e}") from e

        if not self.supported_releases:
            raise ConfigError("host.supported_releases must not be empty")
        if not self.dependencies:
            raise ConfigError("dependencies must not be empty")
        return self


def default_config() -> InstallerConfig:
    return InstallerConfig(raw=copy.deepcopy(DEFAULTS))


def load_config(path: Optional[str] = None) -> InstallerConfig:
    """Load and validate installer config.

    path=None reads DEFAULT_CONFIG_PATH if it exists, else the built-in
    defaults. An explicitly named file must exist. Every problem is
    reported as ConfigError.
    """

    if path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return default_config()
        path = DEFAULT_CONFIG_PATH

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"config file not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"installer config must be YAML: {path}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")

    return InstallerConfig(raw=_merge(DEFAULTS, raw)).validate()
