from __future__ import annotations

import logging
import os
import socket
from pathlib import Path
from typing import FrozenSet, Mapping, Optional

from .command import run_cmd

logger = logging.getLogger(__name__)

CPUINFO_PATH = Path("/proc/cpuinfo")
OS_RELEASE_PATH = Path("/etc/os-release")


def is_root() -> bool:
    return os.geteuid() == 0


def _flags_from_cpuinfo(text: str) -> FrozenSet[str]:
    flags: set[str] = set()
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        # x86 reports "flags", arm reports "Features".
        if sep and key.strip().lower() in {"flags", "features"}:
            flags.update(value.lower().split())
    return frozenset(flags)


def cpu_flags() -> FrozenSet[str]:
    """Lower-cased CPU feature flags of the running host (best-effort)."""

    try:
        flags = _flags_from_cpuinfo(CPUINFO_PATH.read_text(encoding="utf-8", errors="ignore"))
    except OSError:
        flags = frozenset()
    if flags:
        return flags

    r = run_cmd(["lscpu"], check=False)
    if not r.ok:
        logger.debug("lscpu unavailable: %s", r.diagnostic)
        return frozenset()
    return _flags_from_cpuinfo(r.stdout)


def _os_from_hostnamectl(text: str) -> Optional[str]:
    for line in text.splitlines():
        key, sep, value = line.strip().partition(":")
        if sep and key.strip() == "Operating System":
            return value.strip()
    return None


def _os_from_os_release(text: str) -> Optional[str]:
    for line in text.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "PRETTY_NAME":
            return value.strip().strip('"').strip("'")
    return None


def operating_system() -> Optional[str]:
    """Human-readable OS description, e.g. 'Ubuntu 22.04.3 LTS'."""

    r = run_cmd(["hostnamectl", "status"], check=False)
    if r.ok:
        desc = _os_from_hostnamectl(r.stdout)
        if desc:
            return desc
    else:
        logger.debug("hostnamectl failed: %s", r.diagnostic)

    try:
        return _os_from_os_release(OS_RELEASE_PATH.read_text(encoding="utf-8"))
    except OSError:
        return None


def resolve_codename(description: str, supported: Mapping[str, str]) -> Optional[str]:
    """Map an OS description onto a repository codename; first match wins."""

    for needle, codename in supported.items():
        if needle in description:
            return codename
    return None


def primary_ip() -> str:
    r = run_cmd(["hostname", "-I"], check=False)
    if r.ok and r.stdout.split():
        return r.stdout.split()[0]

    # No packets are sent for a UDP connect; it only selects a route.
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect(("1.1.1.1", 80))
            return s.getsockname()[0]
    except OSError:
        return "127.0.0.1"
