from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import DependencyInstallError
from ..lib.pkg import apt_install
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class InstallDependenciesStep:
    step_id = "70_install_dependencies"

    def run(self, ctx: ProvisionContext) -> None:
        # One apt-get call per package so a failure names the culprit.
        for name, package in ctx.config.dependencies:
            logger.info("Installing %s", name, extra=ACTION)
            r = apt_install([package])
            if not r.ok:
                raise DependencyInstallError(f"Failed to install {name}. Check apt output.")
