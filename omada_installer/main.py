from __future__ import annotations

import argparse
import logging
from typing import Optional

from .config import load_config
from .context import ProvisionContext
from .errors import InstallerError
from .lib.hostinfo import is_root
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, run_pipeline
from .steps import (
    CheckCpuStep,
    CheckPrivilegesStep,
    CleanupStep,
    DetectOsStep,
    DownloadPackageStep,
    ExtractPackageStep,
    InstallControllerStep,
    InstallDependenciesStep,
    InstallPrerequisitesStep,
    LocateInstallerStep,
    RegisterRepositoryStep,
    ReportStep,
    ResolveVersionStep,
)

logger = logging.getLogger(__name__)

BANNER = (
    "\n~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~\n"
    "TP-Link Omada Software Controller - Installer\n"
    "https://github.com/monsn0/omada-installer\n"
    "~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~\n"
)


def build_steps():
    return [
        CheckPrivilegesStep(),
        CheckCpuStep(),
        DetectOsStep(),
        InstallPrerequisitesStep(),
        RegisterRepositoryStep(),
        DownloadPackageStep(),
        ExtractPackageStep(),
        LocateInstallerStep(),
        InstallDependenciesStep(),
        ResolveVersionStep(),
        InstallControllerStep(),
        CleanupStep(),
        ReportStep(),
    ]


def run(*, config_path: Optional[str] = None) -> PipelineResult:
    """Provision the local host. Assumes logging is already configured."""

    ctx = ProvisionContext(config=load_config(config_path))
    result = run_pipeline(ctx=ctx, steps=build_steps())
    logger.debug("Ran steps: %s", ",".join(result.ran_steps))
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="omada-installer")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--verbose", action="store_true", help="Echo all log records to the console")

    args = p.parse_args(argv)

    # A non-root run must not write anything, the log file included;
    # 10_check_privileges reports the failure on the console.
    configure_logging(log_path=args.log if is_root() else None, verbose=args.verbose)
    print(BANNER, flush=True)

    try:
        result = run(config_path=args.config)
    except KeyboardInterrupt:
        logger.error("Interrupted.")
        return InstallerError.exit_code
    except InstallerError as e:
        logger.error("%s", e)
        return e.exit_code
    except Exception:
        logger.exception("Installer failed")
        return InstallerError.exit_code

    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
