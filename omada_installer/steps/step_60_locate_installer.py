from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import MissingArtifactError
from ..lib.artifact import find_installers, list_tree
from ..logging_utils import NOTE

logger = logging.getLogger(__name__)


class LocateInstallerStep:
    step_id = "60_locate_installer"

    def run(self, ctx: ProvisionContext) -> None:
        artifact = ctx.require_artifact()
        pattern = ctx.config.installer_glob

        found = find_installers(artifact.extract_dir, pattern)
        if not found:
            listing = list_tree(artifact.extract_dir)
            logger.info("Contents of %s:", artifact.extract_dir, extra=NOTE)
            for line in listing or ["(empty)"]:
                logger.info("  %s", line, extra=NOTE)
            raise MissingArtifactError(
                f"Could not find {pattern} file in the unzipped package at {artifact.extract_dir}."
            )

        if len(found) > 1:
            names = ", ".join(p.name for p in found)
            raise MissingArtifactError(
                f"Found {len(found)} {pattern} files in {artifact.extract_dir}, expected exactly one: {names}"
            )

        artifact.installer_path = found[0]
        logger.info("Found .deb file: %s", found[0], extra=NOTE)
