from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, quiet: bool = True) -> CmdResult:
    argv = ["apt-get"]
    if quiet:
        argv.append("-qq")
    return run_cmd([*argv, "update"], check=False, env=APT_ENV)


def apt_install(packages: Sequence[str], *, quiet: bool = True, capture: bool = False) -> CmdResult:
    """apt-get install -y.

    quiet passes -qq; capture=True hides output from the operator (it still
    lands in the log file).
    """
    argv = ["apt-get"]
    if quiet:
        argv.append("-qq")
    return run_cmd([*argv, "install", "-y", *packages], check=False, capture=capture, env=APT_ENV)


def apt_fix_broken() -> CmdResult:
    """Install whatever a half-configured package is still missing."""
    return run_cmd(["apt-get", "-f", "-y", "install"], check=False, capture=False, env=APT_ENV)


def dpkg_install(deb_path: Path | str) -> CmdResult:
    return run_cmd(["dpkg", "-i", str(deb_path)], check=False, capture=False, env=APT_ENV)
