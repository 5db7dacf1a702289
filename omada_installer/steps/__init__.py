from .step_10_check_privileges import CheckPrivilegesStep
from .step_15_check_cpu import CheckCpuStep
from .step_20_detect_os import DetectOsStep
from .step_30_install_prerequisites import InstallPrerequisitesStep
from .step_40_register_repository import RegisterRepositoryStep
from .step_50_download_package import DownloadPackageStep
from .step_55_extract_package import ExtractPackageStep
from .step_60_locate_installer import LocateInstallerStep
from .step_70_install_dependencies import InstallDependenciesStep
from .step_75_resolve_version import ResolveVersionStep
from .step_80_install_controller import InstallControllerStep
from .step_90_cleanup import CleanupStep
from .step_95_report import ReportStep

__all__ = [
    "CheckPrivilegesStep",
    "CheckCpuStep",
    "DetectOsStep",
    "InstallPrerequisitesStep",
    "RegisterRepositoryStep",
    "DownloadPackageStep",
    "ExtractPackageStep",
    "LocateInstallerStep",
    "InstallDependenciesStep",
    "ResolveVersionStep",
    "InstallControllerStep",
    "CleanupStep",
    "ReportStep",
]
