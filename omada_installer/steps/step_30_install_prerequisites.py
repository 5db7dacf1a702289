from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import ToolInstallError
from ..lib.pkg import apt_install, apt_update
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class InstallPrerequisitesStep:
    step_id = "30_install_prerequisites"

    def run(self, ctx: ProvisionContext) -> None:
        logger.info("Installing script prerequisites", extra=ACTION)
        packages = ctx.config.prerequisites

        r = apt_update()
        if not r.ok:
            # Not fatal by itself: the install below decides.
            logger.warning("apt-get update failed: %s", r.diagnostic)

        r = apt_install(packages, capture=True)
        if r.ok:
            return

        logger.error("Failed to install script prerequisites. Check apt output.")
        # Second attempt with output visible to the operator.
        r = apt_install(packages, quiet=False, capture=False)
        if not r.ok:
            raise ToolInstallError("Prerequisite installation failed again. Exiting.")
