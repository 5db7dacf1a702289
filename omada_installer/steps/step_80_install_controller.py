from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import PrimaryInstallError
from ..lib.pkg import apt_fix_broken, dpkg_install
from ..logging_utils import ACTION, REMEDY

logger = logging.getLogger(__name__)


class InstallControllerStep:
    step_id = "80_install_controller"

    def run(self, ctx: ProvisionContext) -> None:
        artifact = ctx.require_artifact()
        deb = ctx.require_installer()

        logger.info("Installing Omada Software Controller %s", artifact.version, extra=ACTION)
        if dpkg_install(deb).ok:
            return

        logger.error("Failed to install Omada Controller .deb package.")
        logger.warning("Attempting to fix broken dependencies with 'apt-get -f install'...", extra=REMEDY)
        r = apt_fix_broken()
        if not r.ok:
            raise PrimaryInstallError("'apt-get -f install' failed. Cannot install Omada Controller.")

        logger.info("Retrying Omada Software Controller installation...", extra=ACTION)
        if not dpkg_install(deb).ok:
            raise PrimaryInstallError(
                "Failed to install Omada Controller .deb package even after 'apt-get -f install'."
            )
