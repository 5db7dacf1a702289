from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lib.command import CmdResult


class InstallerError(Exception):
    """Fatal provisioning failure. Every subclass exits with the same status."""

    exit_code = 1


class ConfigError(InstallerError):
    """Installer config is missing, unreadable or malformed."""


class UnsupportedEnvironmentError(InstallerError):
    """Privilege, CPU or OS check failed."""


class ToolInstallError(InstallerError):
    pass


class RepositoryError(InstallerError):
    pass


class TransferError(InstallerError):
    pass


class ArchiveError(InstallerError):
    pass


class MissingArtifactError(InstallerError):
    pass


class DependencyInstallError(InstallerError):
    pass


class PrimaryInstallError(InstallerError):
    pass


class CommandError(InstallerError):
    def __init__(self, result: "CmdResult"):
        self.result = result
        super().__init__(f"Command failed ({result.returncode}): {result.command}\n{result.stderr}".rstrip())
