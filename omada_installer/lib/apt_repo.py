from __future__ import annotations

import logging
from pathlib import Path

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)


def fetch_signing_key(url: str) -> CmdResult:
    """Download an ASCII-armored key; the key text is in result.stdout."""
    return run_cmd(["curl", "-fsSL", url], check=False)


def dearmor_key(armored: str, keyring_path: str) -> CmdResult:
    """Write a binary keyring suitable for 'signed-by='."""

    Path(keyring_path).parent.mkdir(parents=True, exist_ok=True)
    return run_cmd(
        ["gpg", "--batch", "--yes", "-o", keyring_path, "--dearmor"],
        check=False,
        input_text=armored,
    )


def write_source_list(path: str, line: str) -> Path:
    """Write a one-line APT sources descriptor, replacing any previous one."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(line.rstrip("\n") + "\n", encoding="utf-8")
    logger.debug("Configured apt repo %s: %s", str(p), line)
    return p
