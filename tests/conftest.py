import subprocess
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from omada_installer.config import load_config
from omada_installer.context import ProvisionContext
from omada_installer.lib import command, hostinfo
from omada_installer.logging_utils import reset_logging

DEB_NAME = "omada_v5.15.24.14_linux_x64_20250512094910.deb"
ARMORED_KEY = "-----BEGIN PGP PUBLIC KEY BLOCK-----\nfake\n-----END PGP PUBLIC KEY BLOCK-----\n"


class FakeHost:
    """Scripted replacement for subprocess.run.

    Every command succeeds unless a failure was queued with fail(). Commands
    with filesystem side effects (download, unzip, gpg) perform them so the
    pipeline sees realistic state.
    """

    def __init__(self):
        self.calls: List[List[str]] = []
        self.os_description = "Ubuntu 22.04.3 LTS"
        self.extracted_files = [DEB_NAME]
        self.ip_output = "192.0.2.10 10.0.0.7 \n"
        self._failures: Dict[Tuple[str, ...], int] = {}

    def fail(self, *prefix: str, times: int = 1) -> None:
        self._failures[prefix] = self._failures.get(prefix, 0) + times

    def ran(self, *prefix: str) -> int:
        return sum(1 for c in self.calls if c[: len(prefix)] == list(prefix))

    def _should_fail(self, argv: List[str]) -> bool:
        for prefix, remaining in self._failures.items():
            if remaining and argv[: len(prefix)] == list(prefix):
                self._failures[prefix] = remaining - 1
                return True
        return False

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)

        if argv[:2] == ["curl", "-#"]:
            # Leaves a (possibly partial) archive behind either way.
            out = Path(argv[argv.index("-o") + 1])
            out.write_bytes(b"PK\x03\x04")

        if self._should_fail(argv):
            return subprocess.CompletedProcess(argv, 100, "", "E: scripted failure\n")

        stdout = ""
        if argv[:2] == ["hostnamectl", "status"]:
            stdout = (
                "   Static hostname: omada\n"
                f"  Operating System: {self.os_description}\n"
                "            Kernel: Linux 5.15.0-91-generic\n"
            )
        elif argv[:2] == ["curl", "-fsSL"]:
            stdout = ARMORED_KEY
        elif argv[:1] == ["gpg"]:
            Path(argv[argv.index("-o") + 1]).write_bytes(b"\x99keyring")
        elif argv[:1] == ["unzip"]:
            dest = Path(argv[argv.index("-d") + 1])
            for rel in self.extracted_files:
                p = dest / rel
                p.parent.mkdir(parents=True, exist_ok=True)
                p.write_bytes(b"!<arch>\n")
        elif argv[:2] == ["hostname", "-I"]:
            stdout = self.ip_output
        return subprocess.CompletedProcess(argv, 0, stdout, "")


@pytest.fixture
def fake_host(monkeypatch):
    host = FakeHost()
    monkeypatch.setattr(command.subprocess, "run", host)
    return host


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(hostinfo.os, "geteuid", lambda: 0)


@pytest.fixture
def cpuinfo(monkeypatch, tmp_path):
    p = tmp_path / "cpuinfo"
    p.write_text("processor\t: 0\nflags\t\t: fpu vme sse sse2 avx avx2\n", encoding="utf-8")
    monkeypatch.setattr(hostinfo, "CPUINFO_PATH", p)
    return p


@pytest.fixture
def config_file(tmp_path):
    root = tmp_path / "root"
    p = tmp_path / "omada-installer.yaml"
    p.write_text(
        f"""
mongodb:
  keyring_path: {root}/usr/share/keyrings/mongodb-server-8.0.gpg
  sources_list_path: {root}/etc/apt/sources.list.d/mongodb-org-8.0.list
omada:
  scratch_dir: {tmp_path / "scratch"}
""",
        encoding="utf-8",
    )
    return p


@pytest.fixture
def ctx(config_file):
    return ProvisionContext(config=load_config(str(config_file)))


@pytest.fixture
def provisionable(fake_host, as_root, cpuinfo):
    """A supported Ubuntu 22.04 host where every command succeeds."""
    return fake_host


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()
